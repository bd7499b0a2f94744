"""
Parameter Sensitivity Analysis for ANF

Analyzes the impact of key hyperparameters:
- K (k_neighbors): number of neighbors
- μ (mu): kernel bandwidth multiplier
- mode: one-step vs. two-step fusion

Usage:
    python run_sensitivity.py --param k_neighbors
"""

import os
import sys
import argparse
import numpy as np
import pandas as pd
from datetime import datetime
from tqdm import tqdm
from sklearn.metrics import adjusted_rand_score, normalized_mutual_info_score

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from anf import AffinityNetworkFusion, ANFError
from anf.datasets import make_multiview_blobs


# Parameter ranges
PARAM_RANGES = {
    'k_neighbors': [5, 10, 15, 20, 30, 50],
    'mu': [0.3, 0.4, 0.5, 0.6, 0.8, 1.0],
    'mode': ['one-step', 'two-step'],
}


def run_sensitivity_analysis(param_name, n_samples=300, n_clusters=4, n_views=3,
                             n_runs=5, save_dir='./results/sensitivity', random_seed=42):
    """
    Run sensitivity analysis for a single parameter.

    Parameters
    ----------
    param_name : str
        Name of the parameter to analyze.
    n_samples, n_clusters, n_views : int
        Shape of the synthetic data.
    n_runs : int
        Number of runs (data seeds) per setting.
    save_dir : str
        Directory to save results.
    random_seed : int
        Base random seed.

    Returns
    -------
    results_df : DataFrame
        Sensitivity results.
    """
    print(f"\n{'='*70}")
    print(f"Sensitivity Analysis: {param_name}")
    print(f"{'='*70}")

    if param_name not in PARAM_RANGES:
        raise ValueError(f"Unknown parameter: {param_name}. "
                         f"Available: {list(PARAM_RANGES.keys())}")

    param_values = PARAM_RANGES[param_name]

    default_params = {
        'n_clusters': n_clusters,
        'k_neighbors': 20,
        'mu': 0.5,
        'mode': 'two-step',
        'verbose': False
    }

    all_results = []

    for param_value in tqdm(param_values, desc=f"Testing {param_name}"):
        scores = {'NMI': [], 'ARI': []}

        for run in range(n_runs):
            seed = random_seed + run
            distances, y_true = make_multiview_blobs(
                n_samples=n_samples, n_clusters=n_clusters, n_views=n_views,
                noise_levels=np.linspace(1.0, 4.0, n_views), random_state=seed
            )

            params = default_params.copy()
            params[param_name] = param_value
            params['random_state'] = seed

            try:
                labels = AffinityNetworkFusion(**params).fit_predict(distances)
            except ANFError as e:
                print(f"  Error with {param_name}={param_value}: {e}")
                continue

            scores['NMI'].append(normalized_mutual_info_score(y_true, labels))
            scores['ARI'].append(adjusted_rand_score(y_true, labels))

        row = {'param_value': param_value}
        for metric, values in scores.items():
            if values:
                row[f'{metric}_mean'] = np.mean(values)
                row[f'{metric}_std'] = np.std(values)
        all_results.append(row)

    results_df = pd.DataFrame(all_results)

    # Print summary
    print(f"\nSensitivity Results for {param_name}:")
    print("-" * 50)
    print(f"{'Value':<15} {'NMI':<12} {'ARI':<12}")
    print("-" * 50)

    for _, row in results_df.iterrows():
        nmi = row.get('NMI_mean', 0)
        ari = row.get('ARI_mean', 0)
        print(f"{str(row['param_value']):<15} {nmi:.4f}       {ari:.4f}")

    # Save results
    os.makedirs(save_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    results_path = os.path.join(save_dir, f'sensitivity_{param_name}_{timestamp}.csv')
    results_df.to_csv(results_path, index=False)
    print(f"\nResults saved to: {results_path}")

    return results_df


def run_all_sensitivity(n_runs=5, save_dir='./results/sensitivity', random_seed=42):
    """Run sensitivity analysis for all parameters."""
    all_results = {}

    for param_name in PARAM_RANGES.keys():
        all_results[param_name] = run_sensitivity_analysis(
            param_name,
            n_runs=n_runs,
            save_dir=save_dir,
            random_seed=random_seed
        )

    return all_results


def main():
    parser = argparse.ArgumentParser(description='ANF Parameter Sensitivity Analysis')
    parser.add_argument('--param', type=str, default='all',
                        help='Parameter name or "all" for all parameters')
    parser.add_argument('--n_runs', type=int, default=5,
                        help='Number of runs per setting')
    parser.add_argument('--save_dir', type=str, default='./results/sensitivity',
                        help='Directory to save results')
    parser.add_argument('--seed', type=int, default=42,
                        help='Random seed')

    args = parser.parse_args()

    if args.param.lower() == 'all':
        run_all_sensitivity(
            n_runs=args.n_runs,
            save_dir=args.save_dir,
            random_seed=args.seed
        )
    else:
        run_sensitivity_analysis(
            args.param,
            n_runs=args.n_runs,
            save_dir=args.save_dir,
            random_seed=args.seed
        )


if __name__ == '__main__':
    main()

"""
ANF Datasets Module
"""
from .synthetic import make_multiview_blobs

__all__ = ['make_multiview_blobs']

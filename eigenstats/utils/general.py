"""
General utility functions for the eigenstats package.
"""

import logging
from typing import List, Optional

import numpy as np

from eigenstats.components.config import ConfigManager


def setup_logging(level: Optional[str] = None) -> None:
    """
    Set up logging for applications using eigenstats.
    
    The library itself never calls this; it only logs through
    module-level loggers.
    
    Args:
        level: Logging level name; defaults to the configured logging.level
    """
    if level is None:
        level = ConfigManager.get_config().get('logging.level', 'warn')
    level = str(level).upper()
    if level == 'WARN':
        level = 'WARNING'
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )


def long_dot(a: np.ndarray, b: np.ndarray) -> float:
    """
    Inner product accumulated in extended precision.
    
    Args:
        a: First vector
        b: Second vector
        
    Returns:
        The inner product rounded back to a double
    """
    a = np.asarray(a, dtype=np.longdouble)
    b = np.asarray(b, dtype=np.longdouble)
    return float(np.dot(a, b))


def long_matmul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Matrix product accumulated in extended precision.
    
    Args:
        a: Left matrix (or vector)
        b: Right matrix (or vector)
        
    Returns:
        The product as a float64 array
    """
    a = np.asarray(a, dtype=np.longdouble)
    b = np.asarray(b, dtype=np.longdouble)
    return (a @ b).astype(np.float64)


def sequential_labels(prefix: str, count: int, start: int = 1) -> List[str]:
    """
    Generate labels like pc1, pc2, ...
    
    Args:
        prefix: Label prefix
        count: Number of labels
        start: Number of the first label
        
    Returns:
        List of labels
    """
    return [f"{prefix}{i}" for i in range(start, start + count)]


def all_finite(values: np.ndarray) -> bool:
    """Check that every element is a defined, finite number."""
    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError):
        return False
    return bool(np.all(np.isfinite(arr)))


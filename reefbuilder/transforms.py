"""Quaternion and matrix helpers built on trimesh.transformations.

Quaternions are numpy arrays in trimesh's [w, x, y, z] order.  Euler
angles are in degrees and follow the engine convention the growth
parameters were tuned against: roll about Z first, then pitch about X,
then yaw about Y.
"""

import numpy as np
import trimesh
from trimesh import transformations as tf

IDENTITY = np.array([1.0, 0.0, 0.0, 0.0])
WORLD_UP = np.array([0.0, 1.0, 0.0])


def normalize(q) -> np.ndarray:
    """Return *q* as a unit quaternion."""
    q = np.asarray(q, dtype=np.float64).reshape(4)
    norm = np.linalg.norm(q)
    if norm == 0.0:
        raise ValueError("zero-length quaternion")
    return q / norm


def euler_quaternion(x: float, y: float, z: float) -> np.ndarray:
    """Quaternion for Euler angles in degrees (applied Z, then X, then Y)."""
    return tf.quaternion_from_euler(np.radians(z), np.radians(x),
                                    np.radians(y), axes='szxy')


def compose(a, b) -> np.ndarray:
    """Rotation *b* followed by rotation *a* (``a * b``)."""
    return normalize(tf.quaternion_multiply(a, b))


def slerp(a, b, fraction: float) -> np.ndarray:
    """Spherical interpolation from *a* (fraction 0) to *b* (fraction 1)."""
    fraction = min(max(float(fraction), 0.0), 1.0)
    return normalize(tf.quaternion_slerp(a, b, fraction))


def from_to_rotation(source, target) -> np.ndarray:
    """Shortest rotation taking direction *source* onto *target*."""
    matrix = trimesh.geometry.align_vectors(
        np.asarray(source, dtype=np.float64),
        np.asarray(target, dtype=np.float64))
    return normalize(tf.quaternion_from_matrix(matrix))


def rotate_vector(q, vector) -> np.ndarray:
    """Rotate a 3-vector by quaternion *q*."""
    return tf.quaternion_matrix(q)[:3, :3] @ np.asarray(vector, dtype=np.float64)


def trs_matrix(position, rotation, scale) -> np.ndarray:
    """4x4 matrix applying scale, then rotation, then translation."""
    matrix = tf.quaternion_matrix(normalize(rotation))
    matrix[:3, :3] = matrix[:3, :3] * np.asarray(scale, dtype=np.float64)
    matrix[:3, 3] = np.asarray(position, dtype=np.float64)
    return matrix


def transform_points(matrix, points) -> np.ndarray:
    """Apply a 4x4 matrix to an (n, 3) array of points."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(points) == 0:
        return points.copy()
    return tf.transform_points(points, matrix)


def transform_normals(matrix, normals) -> np.ndarray:
    """Apply the inverse-transpose of *matrix*'s linear part to normals."""
    normals = np.asarray(normals, dtype=np.float64).reshape(-1, 3)
    if len(normals) == 0:
        return normals.copy()
    normal_matrix = np.linalg.inv(matrix[:3, :3]).T
    return trimesh.util.unitize(normals @ normal_matrix.T)

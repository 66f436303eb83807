"""Exceptions raised by the tau tracking pipeline."""


class SkeletalTauError(Exception):
    """Base class for tracking errors."""


class DegenerateGeometryError(SkeletalTauError, ArithmeticError):
    """Raised when points are collinear or coplanar and have no circumcenter."""


class JointIndexError(SkeletalTauError, IndexError):
    """Raised when a pose holds fewer joints than the triangle table references."""

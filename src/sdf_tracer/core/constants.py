"""Numeric tolerances and budgets shared by the marcher and the surfaces."""

# Convergence threshold for marching and offset used to leave a surface
EPSILON = 1e-3

# Step budget for a single marched ray
MAX_MARCHING_STEPS = 128

# Distance reported by the scene query when no surface qualifies
MAX_DISTANCE = 9999.0

from lockedbox.algebra import (
    build_effect_matrix,
    build_system,
    gf2_eliminate,
    gf2_extract_solution,
    gf2_rank,
    is_reachable,
)
from lockedbox.bitmatrix import BitMatrix
from lockedbox.box import SecureBox
from lockedbox.config import MAX_CELLS, SolverConfig, load_config
from lockedbox.errors import (
    InvalidDimensions,
    LockedBoxError,
    StructuralAssumptionViolation,
)
from lockedbox.solver import (
    apply_presses,
    check_dimensions,
    open_box,
    plan_presses,
    solve_and_open,
)

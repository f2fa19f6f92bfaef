"""All tunable constants for the island simulation.

Every magic number in the codebase must reference this file.
"""

# =============================================================================
# SPECIES
# =============================================================================
HERBIVORE: str = "Herbivore"
CARNIVORE: str = "Carnivore"
SPECIES_NAMES: tuple[str, ...] = (HERBIVORE, CARNIVORE)

HERBIVORE_PARAMS: dict[str, float] = {
    "w_birth": 8.0,
    "sigma_birth": 1.5,
    "beta": 0.9,
    "eta": 0.05,
    "a_half": 40.0,
    "phi_age": 0.6,
    "w_half": 10.0,
    "phi_weight": 0.1,
    "mu": 0.25,
    "gamma": 0.2,
    "zeta": 3.5,
    "xi": 1.2,
    "omega": 0.4,
    "f": 10.0,
    "delta_phi_max": 0.0,   # herbivores never hunt
}

CARNIVORE_PARAMS: dict[str, float] = {
    "w_birth": 6.0,
    "sigma_birth": 1.0,
    "beta": 0.75,
    "eta": 0.125,
    "a_half": 4.0,
    "phi_age": 0.3,
    "w_half": 4.0,
    "phi_weight": 0.4,
    "mu": 0.4,
    "gamma": 0.8,
    "zeta": 3.5,
    "xi": 1.1,
    "omega": 0.8,
    "f": 50.0,
    "delta_phi_max": 10.0,
}

# Age and weight given to stocked animals when none is specified
DEFAULT_AGE: int = 5
DEFAULT_WEIGHT: float = 20.0

# =============================================================================
# TERRAIN
# =============================================================================
WATER: str = "water"
DESERT: str = "desert"
LOWLAND: str = "lowland"
HIGHLAND: str = "highland"

TERRAIN_SYMBOLS: dict[str, str] = {
    "W": WATER,
    "D": DESERT,
    "L": LOWLAND,
    "H": HIGHLAND,
}

# Fodder available at the start of every year
TERRAIN_FODDER: dict[str, float] = {
    WATER: 0.0,
    DESERT: 0.0,
    LOWLAND: 800.0,
    HIGHLAND: 300.0,
}

# Terrain that can hold animals
HABITABLE_TERRAIN: frozenset[str] = frozenset({DESERT, LOWLAND, HIGHLAND})

# =============================================================================
# MIGRATION
# =============================================================================
# (dx, dy) offsets: north, east, south, west
MIGRATION_DIRECTIONS: list[tuple[int, int]] = [(0, -1), (1, 0), (0, 1), (-1, 0)]

# =============================================================================
# FEEDING
# =============================================================================
# Order in which herbivores graze: "weakest_first" (ascending fitness)
# or "fittest_first" (descending fitness). Prey order is always weakest first.
FEEDING_ORDERS: tuple[str, ...] = ("weakest_first", "fittest_first")
HERBIVORE_FEEDING_ORDER: str = "weakest_first"

# =============================================================================
# DEFAULT SCENARIO
# =============================================================================
DEFAULT_ISLAND_MAP: str = """\
WWWWWWW
WHHLLLW
WHLLLDW
WLLLHHW
WDLLLLW
WWWWWWW"""

DEFAULT_POPULATION: list[tuple[tuple[int, int], str, int]] = [
    ((3, 2), HERBIVORE, 150),
]

# Carnivores introduced into the default scenario after a burn-in period
DEFAULT_CARNIVORE_YEAR: int = 50
DEFAULT_CARNIVORE_POPULATION: list[tuple[tuple[int, int], str, int]] = [
    ((3, 2), CARNIVORE, 20),
]

DEFAULT_YEARS: int = 200
DEFAULT_SEED: int = 42

# =============================================================================
# DASHBOARD
# =============================================================================
DASHBOARD_UPDATE_INTERVAL: int = 5  # redraw every N simulated years

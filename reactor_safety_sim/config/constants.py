"""Default physical parameters, thresholds, gains and scenario settings."""

# =============================================================================
# Plant (first-order lumped thermal model)
# =============================================================================

AMBIENT_TEMP_C = 25.0
THERMAL_MASS = 100.0
K_POWER = 200.0        # heat input per unit power fraction
K_COOL = 1.5           # heat removal per unit coolant fraction per °C above ambient

INITIAL_TEMP_C = 300.0
INITIAL_POWER = 0.0
INITIAL_COOLANT = 0.5

# =============================================================================
# Sensors
# =============================================================================

SENSOR_NOISE_STD = 0.25
SENSOR_VALID_RANGE_C = (0.0, 2000.0)

# Triple-redundant channels, each seeded as master_seed ^ mask
CHANNELS = ["s1", "s2", "s3"]
CHANNEL_SEED_MASKS = {
    "s1": 0xA1,
    "s2": 0xB2,
    "s3": 0xC3,
}

FAULT_NONE = "none"
FAULT_STUCK = "stuck"
FAULT_BIAS = "bias"
FAULT_DRIFT = "drift"
FAULT_DROPOUT_EVERY = "dropout_every"

FAULT_KINDS = (FAULT_NONE, FAULT_STUCK, FAULT_BIAS, FAULT_DRIFT, FAULT_DROPOUT_EVERY)

# =============================================================================
# Safety (2-of-3 voting trip)
# =============================================================================

TRIP_TEMP_C = 420.0
MAX_SENSOR_DELTA_C = 10.0

STATUS_ARMED = "armed"
STATUS_TRIPPED = "tripped"

TRIP_OVER_TEMP = "over-temp"
TRIP_SENSOR_INVALID = "sensor-invalid"
TRIP_SENSOR_DISAGREE = "sensor-disagree"

TRIP_REASONS = (TRIP_OVER_TEMP, TRIP_SENSOR_INVALID, TRIP_SENSOR_DISAGREE)

# =============================================================================
# Controller (PID)
# =============================================================================

PID_KP = 0.02
PID_KI = 0.005
PID_KD = 0.0
PID_OUT_MIN = 0.0
PID_OUT_MAX = 1.0

# Integral decay applied while saturated in the direction of the error
ANTI_WINDUP_DECAY = 0.98

# =============================================================================
# Run defaults
# =============================================================================

DEFAULT_SECONDS = 120.0
DEFAULT_DT_MS = 50
DEFAULT_SETPOINT_C = 350.0
DEFAULT_SEED = 12345

# =============================================================================
# Scenarios
# =============================================================================

SCENARIO_NORMAL = "normal"
SCENARIO_OVERHEAT = "overheat"
SCENARIO_LOSS_OF_COOLING = "loss-of-cooling"
SCENARIO_SENSOR_DISAGREE = "sensor-disagree"

SCENARIOS = [
    SCENARIO_NORMAL,
    SCENARIO_OVERHEAT,
    SCENARIO_LOSS_OF_COOLING,
    SCENARIO_SENSOR_DISAGREE,
]

SCENARIO_NOISE_STD = 0.15
SCENARIO_COOLANT = {
    SCENARIO_NORMAL: 0.6,
    SCENARIO_OVERHEAT: 0.2,
    SCENARIO_LOSS_OF_COOLING: 0.7,
    SCENARIO_SENSOR_DISAGREE: 0.6,
}
LOSS_OF_COOLING_FRACTION = 0.3   # of run duration, after which coolant drops
LOSS_OF_COOLING_COOLANT = 0.05
SENSOR_DISAGREE_BIAS_C = 20.0

"""Application constants."""

# Embedding layout: [height, weight, value]
VECTOR_SIZE = 3

# Nearest-neighbour search
QUERY_RESULT_LIMIT = 10

# BMI classification thresholds (kg/m^2). The bands are closed on both ends,
# so values strictly between two bands (e.g. 22.95, 30.0) are unclassified.
UNDERWEIGHT_BELOW = 18.5
NORMAL_MAX = 22.9
OVERWEIGHT_MIN = 23.0
OVERWEIGHT_MAX = 24.9
OBESE_MIN = 25.0
OBESE_MAX = 29.9
OBESE_SEVERE_ABOVE = 30.0

# bmi_records.id is a 32-bit INTEGER
MAX_RECORD_ID = 2**31 - 1

# Indices / enums used across modules (keep ints for JIT friendliness)

# Dubins words
LSL = 0
LSR = 1
RSL = 2
RSR = 3
RLR = 4
LRL = 5
N_WORDS = 6

WORD_NAMES = ("LSL", "LSR", "RSL", "RSR", "RLR", "LRL")

# word parameters (normalized by the turning radius)
W_T = 0 # first arc angle
W_P = 1 # middle arc angle or straight length
W_Q = 2 # last arc angle
F_WORD = 3 # 3 features

# trial status codes recorded by the metrics trace
TRIAL_BEST = "BEST"
TRIAL_KEEP = "KEEP"
TRIAL_SKIP = "SKIP"

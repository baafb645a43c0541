# Simple parameter defaults (extend freely)
DEFAULTS = {
    "iters": 10,                # best-of-N trial count
    "log_period": 1,            # record every N-th trial in the metrics trace
    "turning_radius": 1.0,
    "origin_heading": 0.0,
    "return_to_initial": True,
    "trial_close_loop": False,  # loop closure in the per-trial score
    "workers": 1,               # >1 fans trials out on a thread pool
    "skip_failed_trials": False,
    "oracle": "local",          # "local" or "lkh"
    "ls_budget": 10000,         # improving moves allowed for the local oracle
    "lkh_executable": "LKH",
    "lkh_runs": 1,
    "lkh_timeout": None,        # seconds, None waits forever
    "lkh_scale": 1000.0,        # cost -> integer weight multiplier
    "lkh_scratch_dir": None,
}

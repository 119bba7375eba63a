import torch

# --- Configuration ---
DEFAULT_DTYPE = torch.float64
"""The default floating point precision for matrix values (e.g., torch.float64, torch.float32)."""

INDEX_DTYPE = torch.long
"""The integer dtype used for every index and index pointer tensor the package allocates."""

torch.set_default_dtype(DEFAULT_DTYPE)

"""Services: long-format frames, file conversion orchestration, progress and summary."""

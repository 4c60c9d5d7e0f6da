"""Order routing state machine and orchestration."""

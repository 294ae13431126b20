"""Language model providers, emotion scoring and response orchestration."""

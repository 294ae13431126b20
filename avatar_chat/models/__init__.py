"""Data contracts exchanged between the server and the orchestrator."""

"""Runtime services (telemetry) shared by the engine and host layers."""

"""Users module exposes the fixed principals the service authenticates against."""

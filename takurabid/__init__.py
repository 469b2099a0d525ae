"""TakuraBid notification delivery and read-state service."""

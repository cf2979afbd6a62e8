"""Host adapters: pygame drivers and the fixed-cadence run loop."""

"""Session and game lifecycle services.

Managers read and mutate the shared state store and return the outbound
events for the gateway to emit; the round and merge rules they apply are
plain functions with no I/O, so transport concerns stay out of game logic.
"""

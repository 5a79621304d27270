"""Application services layer (record store, share token codec).

Services coordinate domain models and infrastructure (storage backends, encoding).
They should avoid UI concerns.
"""

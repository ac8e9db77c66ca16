"""Application layer: ports and services of the batching core."""

"""Concrete curves, hashes and commitment schemes for the ring-VRF core."""

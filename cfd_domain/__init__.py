"""
CFD Domain Generator

Derives the computational domain of an urban CFD simulation from
building footprints: the influence region around a point of interest,
the BPG-sized domain boundary (round, rectangle or oval) and the
blockage ratio check that enlarges the boundary once when needed.

Can be used as:
- CLI tool: python -m cfd_domain.main <config.json>
- Library: cfd_domain.pipeline.compute_domain(config, buildings)
"""

__version__ = "0.3.0"
__author__ = "CFD Domain Team"

"""
Coordinate generation and analysis.

- `sampler`: uniform points inside a spherical cap
- `density`: grid counts + Poisson z-scores
- `anomaly`: per-circle anomalies and cross-circle winners
- `flower`: standard / flower power orchestration
"""

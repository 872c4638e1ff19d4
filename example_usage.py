"""
Example usage of splinefilter for smoothing noisy, unevenly sampled signals.
"""

from pathlib import Path

import numpy as np
import pandas as pd

from splinefilter import SplineConfig, fit, make_domain
from splinefilter.smoothing import SplineSmoother, smooth_csv
from splinefilter.smoothing.plots import save_diagnostic_plot
from splinefilter.utils.helpers import setup_logging


def make_signal(n: int = 400, seed: int = 1):
    """Slow sine plus fast ripple plus noise on random abscissas."""
    rng = np.random.default_rng(seed)
    x = np.sort(rng.uniform(0.0, 100.0, n))
    y = np.sin(2 * np.pi * x / 40.0) + 0.3 * np.sin(2 * np.pi * x / 2.0) + 0.1 * rng.standard_normal(n)
    return x, y


# Example 1: Core API, one domain shared by several signals
def example_core():
    """Build one domain and fit two signals against it."""
    print("Example 1: Core API")
    print("-" * 50)

    x, y = make_signal()
    domain = make_domain(x, wavelength=10.0)
    print(f"  {domain}")

    smooth = fit(domain, y)
    shifted = fit(domain, y + 1.0)

    for xi in (10.0, 50.0, 90.0):
        print(f"  f({xi:5.1f}) = {smooth.evaluate(xi):+.4f}   shifted: {shifted.evaluate(xi):+.4f}")
    print(f"  slope at ends: {smooth.slope(domain.xmin):.2e}, {smooth.slope(domain.xmax):.2e}")


# Example 2: Smoother with configuration, saving results
def example_smoother(output_dir: Path):
    """Smooth a signal and save the curve, metadata and a diagnostic plot."""
    print("\nExample 2: SplineSmoother")
    print("-" * 50)

    config = SplineConfig(wavelength=10.0)
    setup_logging(config.log_level)

    x, y = make_signal()
    result = SplineSmoother(config).smooth(x, y)
    csv_path, yaml_path = result.save_all(output_dir)
    plot_path = save_diagnostic_plot(result, output_dir / "smoothing.png")

    print(f"  M={result.domain.M}, DX={result.domain.DX:.3f}, rms={result.metrics.rms:.4f}")
    print(f"  Saved: {csv_path}, {yaml_path}, {plot_path}")


# Example 3: CSV in, files out
def example_csv(output_dir: Path):
    """One-line smoothing of a CSV file."""
    print("\nExample 3: smooth_csv")
    print("-" * 50)

    x, y = make_signal(seed=2)
    csv_path = output_dir / "samples.csv"
    output_dir.mkdir(parents=True, exist_ok=True)
    pd.DataFrame({"x": x, "y": y}).to_csv(csv_path, index=False)

    config_path = output_dir / "spline_config.yaml"
    SplineConfig(wavelength=5.0).to_yaml_file(config_path)

    result = smooth_csv(csv_path, config=SplineConfig.from_yaml_file(config_path), output_dir=output_dir / "csv")
    print(f"  Smoothed {result.domain.NX} samples onto {result.domain.M + 1} nodes")


if __name__ == "__main__":
    output = Path("example_output")
    example_core()
    example_smoother(output)
    example_csv(output)

"""
Contour plotting for 2D scalar fields.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Tuple, Optional

from postprocessing.fields import ScalarField


class ContourPlotter:
    """
    Plots filled contours for scalar fields on structured grids.
    """

    def __init__(self, figsize: Tuple[float, float] = (10, 5)):
        """
        Initialize contour plotter.

        Args:
            figsize: Figure dimensions
        """
        self.figsize = figsize

    def plot_ftle(self,
                  field: ScalarField,
                  levels: int = 50,
                  cmap: str = 'viridis',
                  title: Optional[str] = None,
                  save_path: Optional[str] = None):
        """
        Plot an FTLE field.

        Non-finite values (degenerate cells) are masked.

        Args:
            field: FTLE scalar field with XX/YY coordinates
            levels: Number of contour levels
            cmap: Matplotlib colormap
            title: Plot title (defaults to the field name and time)
            save_path: Output file path (None = show)
        """
        if field.XX is None or field.YY is None:
            raise ValueError(f"Field '{field.name}' has no grid coordinates")

        data = np.ma.masked_invalid(field.data)

        fig, ax = plt.subplots(figsize=self.figsize)

        contour = ax.contourf(field.XX, field.YY, data, levels=levels, cmap=cmap)
        plt.colorbar(contour, ax=ax, label='FTLE')

        ax.set_xlabel('X')
        ax.set_ylabel('Y')
        ax.set_title(title or f"{field.name} (t = {field.time:g})")
        ax.set_aspect('equal')

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150)
            print(f"Contours saved: {save_path}")
        else:
            plt.show()

        plt.close(fig)

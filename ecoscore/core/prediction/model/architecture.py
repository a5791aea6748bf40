"""Neural network definition backing the eco-score model artifact."""

from typing import List, Sequence

import torch
from torch import nn

SCORE_SCALE = 100.0


def _hidden_block(in_features: int, out_features: int, dropout_rate: float) -> nn.Sequential:
    return nn.Sequential(
        nn.Linear(in_features, out_features),
        nn.ReLU(),
        nn.Dropout(dropout_rate),
    )


class EcoScoreNetwork(nn.Module):
    """Feed-forward regressor producing an eco-score.

    The single output unit is squashed with a sigmoid and scaled by
    ``SCORE_SCALE``, so raw outputs already lie in [0, 100].
    """

    def __init__(
        self,
        input_dimension: int,
        hidden_layer_sizes: Sequence[int],
        dropout_rate: float = 0.10,
    ) -> None:
        super().__init__()
        self.input_dimension = input_dimension
        widths: List[int] = [input_dimension, *hidden_layer_sizes]
        self.hidden = nn.Sequential(
            *(
                _hidden_block(in_size, out_size, dropout_rate)
                for in_size, out_size in zip(widths, widths[1:])
            )
        )
        self.head = nn.Linear(widths[-1], 1)

    def forward(self, inputs):  # type: ignore[override]
        return torch.sigmoid(self.head(self.hidden(inputs))) * SCORE_SCALE

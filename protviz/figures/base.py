# Shared constants for the Altair backend.
# Order of PALETTE controls which color each description category receives.

from natsort import natsorted

PALETTE = [
    "#F8766D",  # salmon
    "#00BA38",  # green
    "#619CFF",  # blue
    "#C77CFF",  # violet
    "#E68613",  # orange
    "#00BFC4",  # teal
    "#B79F00",  # olive
    "#FF61C3",  # pink
    "#7CAE00",  # lime
    "#00A9FF",  # sky blue
    "#8494FF",  # periwinkle
    "#ED68ED",  # magenta
]


def category_colors(keys) -> dict:
    """Assign palette colors to category keys in natural-sort order.

    The result depends only on the set of keys, so the same descriptions get
    the same colors on every run.  The palette repeats when exhausted.
    """
    ordered = natsorted({str(k) for k in keys})
    return {key: PALETTE[i % len(PALETTE)] for i, key in enumerate(ordered)}

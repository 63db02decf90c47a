"""
Render containment.

`render_safely` runs one asset's render and turns any exception into a
fixed-shape error presentation, so that one corrupt asset never prevents
the rest of the list from rendering.
"""

import logging
from typing import Callable, Optional

from case_assets.core.config import get_settings
from case_assets.models.asset import Asset
from case_assets.models.presentation import Presentation, RenderErrorPresentation, RenderFault

logger = logging.getLogger(__name__)


def render_safely(
    asset: Asset,
    thunk: Callable[[], Presentation],
    show_details: Optional[bool] = None,
) -> Presentation:
    """
    Renders an asset inside an error boundary.

    Args:
        asset (Asset): The asset being rendered (used for the log record and
            the fault panel).
        thunk (Callable[[], Presentation]): Zero-argument render function.
        show_details (Optional[bool]): Include the raw error detail. Defaults
            to the `DEBUG_ASSETS` setting.

    Returns:
        Presentation: The thunk's result, or a `render_error` presentation.
    """

    try:
        return thunk()
    except Exception as e:
        logger.exception("Failed to render asset %s (%s)", asset.file_name, asset.file_type)

        if show_details is None:
            show_details = get_settings().debug_assets

        return RenderErrorPresentation(
            message=f"Failed to render {asset.file_name} ({asset.file_type or 'unknown type'})",
            fault=RenderFault(
                file_id=asset.file_id,
                file_name=asset.file_name,
                file_type=asset.file_type,
                error_type=type(e).__name__,
                detail=f"{type(e).__name__}: {e}" if show_details else None,
            ),
        )

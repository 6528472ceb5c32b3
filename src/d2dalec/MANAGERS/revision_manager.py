# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Revision reconciliation between a previously generated specification and
the commit currently being packaged.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..MODELS.dalec_spec import PreviousSpec

logger = logging.getLogger(__name__)

DEFAULT_REVISION = "1"


class RevisionState(str, Enum):
    """Relation between the previous and the current commit."""

    NO_PREVIOUS = "no-previous"  # Nothing recorded to compare against
    UNCHANGED = "unchanged"
    STALE = "stale"


@dataclass
class RevisionDecision:
    """Outcome of one reconciliation."""

    state: RevisionState
    revision: str
    bumped: bool = False


def reconcile_revision(
    previous: Optional[PreviousSpec],
    current_commit: str,
    default: str = DEFAULT_REVISION,
) -> RevisionDecision:
    """
    Decides the revision of the specification being generated.

    The revision is bumped only when the previous specification was built
    from the same commit. A new commit starts again from ``default``.

    Args:
        previous: The previous specification, or None if there is none.
        current_commit: The commit resolved for this run.
        default: The freshly generated revision.

    Returns:
        The reconciliation state and the revision to emit.
    """
    if previous is None or not previous.commit:
        return RevisionDecision(state=RevisionState.NO_PREVIOUS, revision=default)

    if previous.commit != current_commit:
        logger.debug("Commit changed from %s to %s, revision reset", previous.commit, current_commit)
        return RevisionDecision(state=RevisionState.STALE, revision=default)

    try:
        prev_revision = int(previous.revision)
    except (TypeError, ValueError):
        logger.warning("Invalid previous revision '%s', resetting to %s", previous.revision, default)
        return RevisionDecision(state=RevisionState.UNCHANGED, revision=default)

    revision = str(prev_revision + 1)
    logger.info("Commit %s unchanged, revision bumped to %s", current_commit, revision)
    return RevisionDecision(state=RevisionState.UNCHANGED, revision=revision, bumped=True)

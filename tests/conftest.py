import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import

MOVIES_CSV = """\
Movie Name,Year of Release,Run Time in minutes,Genre,Movie Rating,Description,Director,Stars
"Inception",2010,148,"Action, Sci-Fi",8.8,"A thief who steals corporate secrets","Christopher Nolan","Leonardo DiCaprio, Joseph Gordon-Levitt"
Up,2009,96,Animation,8.3,"An old man ties balloons to his house",Pete Docter,"Ed Asner, Jordan Nagai"
Up,2009,96,Animation,8.3,Duplicate row,Pete Docter,Ed Asner
Coco,2017,105,Animation,8.4,A boy journeys to the Land of the Dead,Lee Unkrich,Anthony Gonzalez
The Room,2003,99,Drama,N/A,Cult classic,Tommy Wiseau,Tommy Wiseau
"""


@pytest.fixture(name="movies_csv")
def movies_csv_fixture(tmp_path: Path) -> Path:
    """Small movie dataset: five rows, four distinct titles, one unparsable rating."""

    path = tmp_path / "movies.csv"
    path.write_text(MOVIES_CSV, encoding="utf-8")
    return path

"""Put the project root on the path so `app`, `configs` and `product_scout` import."""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

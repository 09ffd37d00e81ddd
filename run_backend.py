#!/usr/bin/env python
"""Script to run the todo tracker server."""
import os
import sys
from pathlib import Path

# Run from the repository root so relative SQLite paths land here
root_dir = Path(__file__).resolve().parent
sys.path.insert(0, str(root_dir))
os.chdir(root_dir)

import uvicorn

from todo_app.config import HOST, PORT

if __name__ == "__main__":
    uvicorn.run(
        "todo_app.main:app",
        host=HOST,
        port=PORT,
        reload=True
    )

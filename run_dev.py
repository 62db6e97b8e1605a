# run_dev.py
"""
Local development launcher for FastAPI.
Equivalent to: `uvicorn critic_ai.app:app --reload --host 0.0.0.0 --port 3001`
"""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "critic_ai.app:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "3001")),
        reload=True,
    )

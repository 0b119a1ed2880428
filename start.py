#!/usr/bin/env python3
"""
Startup script for container deployments
Reads PORT and HOST from the environment
"""
import os
import subprocess
import sys

# Get port from environment, default to 8000
port = os.environ.get("PORT", "8000")
host = os.environ.get("HOST", "0.0.0.0")

print(f"Starting Taskboard on {host}:{port}...")

cmd = [
    sys.executable, "-m", "uvicorn",
    "main:app",
    "--host", host,
    "--port", port
]

sys.exit(subprocess.run(cmd).returncode)

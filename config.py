"""Simple configuration for the genesim app."""
import os
from pathlib import Path


class Config:
    SECRET_KEY = os.environ.get('GENESIM_SECRET', 'dev')
    STORE_PATH = os.environ.get(
        'GENESIM_STORE_PATH',
        str(Path(__file__).resolve().parent / 'simulation_runs.json'),
    )
    IDLE_TIMEOUT = float(os.environ.get('GENESIM_IDLE_TIMEOUT', '60'))

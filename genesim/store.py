"""JSON-file archive of past simulation runs, their generations and notable organisms."""

import json
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Dict, List


class UnknownRunError(KeyError):
    """Raised when a run id is not present in the store."""


def _empty_archive() -> Dict[str, List]:
    return {"simulations": [], "generations": [], "organisms": []}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class RunStore:
    """Persist runs to a single JSON document guarded by a lock."""

    def __init__(self, path):
        self.path = Path(path)
        self._lock = Lock()

    def _load(self) -> Dict[str, List]:
        if not self.path.exists():
            return _empty_archive()
        try:
            archive = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError):
            return _empty_archive()
        if not isinstance(archive, dict):
            return _empty_archive()
        for table in ("simulations", "generations", "organisms"):
            if not isinstance(archive.get(table), list):
                archive[table] = []
        return archive

    def _write(self, archive: Dict[str, List]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(archive, indent=2))

    def _insert(self, table: str, row: Dict) -> int:
        with self._lock:
            archive = self._load()
            rows = archive[table]
            row_id = max((item.get("id", 0) for item in rows), default=0) + 1
            rows.append({"id": row_id, **row, "dateCreated": _timestamp()})
            self._write(archive)
            return row_id

    def save_simulation(self, name: str, config: Dict) -> int:
        return self._insert("simulations", {"name": name, "config": dict(config or {})})

    def save_generation(self, simulation_id: int, record: Dict) -> int:
        return self._insert(
            "generations",
            {
                "simulationId": simulation_id,
                "generation": record.get("generation"),
                "bestFitness": record.get("bestFitness"),
                "averageFitness": record.get("averageFitness"),
                "populationSize": record.get("populationSize"),
            },
        )

    def save_organism(self, simulation_id: int, generation_id: int, organism: Dict) -> int:
        return self._insert(
            "organisms",
            {
                "simulationId": simulation_id,
                "generationId": generation_id,
                "genome": organism.get("genome"),
                "fitness": organism.get("fitness", 0.0),
            },
        )

    def list_simulations(self) -> List[Dict]:
        """All runs, newest first."""
        with self._lock:
            simulations = self._load()["simulations"]
        return sorted(simulations, key=lambda item: item.get("id", 0), reverse=True)

    def simulation_details(self, simulation_id: int) -> Dict:
        with self._lock:
            archive = self._load()

        for simulation in archive["simulations"]:
            if simulation.get("id") == simulation_id:
                break
        else:
            raise UnknownRunError(simulation_id)

        generations = [
            item for item in archive["generations"] if item.get("simulationId") == simulation_id
        ]
        generations.sort(key=lambda item: item.get("generation") or 0)
        return {**simulation, "generations": generations}

    def best_organisms(self, generation_id: int, limit: int = 10) -> List[Dict]:
        with self._lock:
            organisms = self._load()["organisms"]
        matching = [item for item in organisms if item.get("generationId") == generation_id]
        matching.sort(key=lambda item: item.get("fitness") or 0.0, reverse=True)
        return matching[: max(0, limit)]

    def reset(self) -> None:
        """Clear the on-disk archive."""
        with self._lock:
            self._write(_empty_archive())

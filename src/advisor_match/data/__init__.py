from .snapshot import Snapshot, load_snapshot, snapshot_from_dict

__all__ = ["Snapshot", "load_snapshot", "snapshot_from_dict"]

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class OperationType(IntEnum):
    """
    Kind of a long-running operation, persisted as its integer code.

    The codes are shared by every node of the cluster, so existing values
    must never be renumbered.
    """

    UNKNOWN = 0
    CLUSTER_BOOTSTRAP = 1
    CLUSTER_JOIN = 2
    BACKUP_CREATE = 3
    BACKUP_RENAME = 4
    BACKUP_RESTORE = 5
    BACKUP_REMOVE = 6
    CONSOLE_SHOW = 7
    INSTANCE_CREATE = 8
    INSTANCE_UPDATE = 9
    INSTANCE_RENAME = 10
    INSTANCE_MIGRATE = 11
    INSTANCE_LIVE_MIGRATE = 12
    INSTANCE_FREEZE = 13
    INSTANCE_UNFREEZE = 14
    INSTANCE_DELETE = 15
    INSTANCE_START = 16
    INSTANCE_STOP = 17
    INSTANCE_RESTART = 18
    COMMAND_EXEC = 19
    SNAPSHOT_CREATE = 20
    SNAPSHOT_RENAME = 21
    SNAPSHOT_RESTORE = 22
    SNAPSHOT_TRANSFER = 23
    SNAPSHOT_UPDATE = 24
    SNAPSHOT_DELETE = 25
    IMAGE_DOWNLOAD = 26
    IMAGE_DELETE = 27
    IMAGE_TOKEN = 28
    IMAGE_REFRESH = 29
    VOLUME_COPY = 30
    VOLUME_CREATE = 31
    VOLUME_MIGRATE = 32
    VOLUME_MOVE = 33
    VOLUME_SNAPSHOT_CREATE = 34
    VOLUME_SNAPSHOT_DELETE = 35
    VOLUME_SNAPSHOT_UPDATE = 36
    PROJECT_RENAME = 37
    IMAGES_EXPIRE = 38
    IMAGES_PRUNE_LEFTOVER = 39
    IMAGES_UPDATE = 40
    IMAGES_SYNCHRONIZE = 41
    LOGS_EXPIRE = 42
    INSTANCE_TYPES_UPDATE = 43
    BACKUPS_EXPIRE = 44
    SNAPSHOTS_EXPIRE = 45
    CUSTOM_VOLUME_SNAPSHOTS_EXPIRE = 46
    CUSTOM_VOLUME_BACKUP_CREATE = 47
    CUSTOM_VOLUME_BACKUP_REMOVE = 48
    CUSTOM_VOLUME_BACKUP_RENAME = 49
    CUSTOM_VOLUME_BACKUP_RESTORE = 50
    WARNINGS_PRUNE_RESOLVED = 51
    CLUSTER_MEMBER_EVACUATE = 52
    CLUSTER_MEMBER_RESTORE = 53
    IMAGE_IMPORT = 54
    NETWORK_UPDATE = 55

    @classmethod
    def from_code(cls, code: int) -> OperationType | int:
        """
        Return the member for a stored code, or the bare int for codes this
        node does not know (e.g. written by a newer cluster member).
        """
        try:
            return cls(code)
        except ValueError:
            return int(code)

    @property
    def description(self) -> str:
        """Human-readable description, as shown to API clients."""
        return _DESCRIPTIONS.get(self, "Executing operation")


_DESCRIPTIONS = {
    OperationType.CLUSTER_BOOTSTRAP: "Creating bootstrap node",
    OperationType.CLUSTER_JOIN: "Joining cluster",
    OperationType.BACKUP_CREATE: "Backing up instance",
    OperationType.BACKUP_RENAME: "Renaming instance backup",
    OperationType.BACKUP_RESTORE: "Restoring backup",
    OperationType.BACKUP_REMOVE: "Removing instance backup",
    OperationType.CONSOLE_SHOW: "Showing console",
    OperationType.INSTANCE_CREATE: "Creating instance",
    OperationType.INSTANCE_UPDATE: "Updating instance",
    OperationType.INSTANCE_RENAME: "Renaming instance",
    OperationType.INSTANCE_MIGRATE: "Migrating instance",
    OperationType.INSTANCE_LIVE_MIGRATE: "Live-migrating instance",
    OperationType.INSTANCE_FREEZE: "Freezing instance",
    OperationType.INSTANCE_UNFREEZE: "Unfreezing instance",
    OperationType.INSTANCE_DELETE: "Deleting instance",
    OperationType.INSTANCE_START: "Starting instance",
    OperationType.INSTANCE_STOP: "Stopping instance",
    OperationType.INSTANCE_RESTART: "Restarting instance",
    OperationType.COMMAND_EXEC: "Executing command",
    OperationType.SNAPSHOT_CREATE: "Snapshotting instance",
    OperationType.SNAPSHOT_RENAME: "Renaming snapshot",
    OperationType.SNAPSHOT_RESTORE: "Restoring snapshot",
    OperationType.SNAPSHOT_TRANSFER: "Transferring snapshot",
    OperationType.SNAPSHOT_UPDATE: "Updating snapshot",
    OperationType.SNAPSHOT_DELETE: "Deleting snapshot",
    OperationType.IMAGE_DOWNLOAD: "Downloading image",
    OperationType.IMAGE_DELETE: "Deleting image",
    OperationType.IMAGE_TOKEN: "Image download token",
    OperationType.IMAGE_REFRESH: "Refreshing image",
    OperationType.VOLUME_COPY: "Copying storage volume",
    OperationType.VOLUME_CREATE: "Creating storage volume",
    OperationType.VOLUME_MIGRATE: "Migrating storage volume",
    OperationType.VOLUME_MOVE: "Moving storage volume",
    OperationType.VOLUME_SNAPSHOT_CREATE: "Creating storage volume snapshot",
    OperationType.VOLUME_SNAPSHOT_DELETE: "Deleting storage volume snapshot",
    OperationType.VOLUME_SNAPSHOT_UPDATE: "Updating storage volume snapshot",
    OperationType.PROJECT_RENAME: "Renaming project",
    OperationType.IMAGES_EXPIRE: "Cleaning up expired images",
    OperationType.IMAGES_PRUNE_LEFTOVER: "Pruning leftover image files",
    OperationType.IMAGES_UPDATE: "Updating images",
    OperationType.IMAGES_SYNCHRONIZE: "Synchronizing images",
    OperationType.LOGS_EXPIRE: "Expiring log files",
    OperationType.INSTANCE_TYPES_UPDATE: "Updating instance types",
    OperationType.BACKUPS_EXPIRE: "Cleaning up expired instance backups",
    OperationType.SNAPSHOTS_EXPIRE: "Cleaning up expired instance snapshots",
    OperationType.CUSTOM_VOLUME_SNAPSHOTS_EXPIRE: "Cleaning up expired volume snapshots",
    OperationType.CUSTOM_VOLUME_BACKUP_CREATE: "Creating custom volume backup",
    OperationType.CUSTOM_VOLUME_BACKUP_REMOVE: "Deleting custom volume backup",
    OperationType.CUSTOM_VOLUME_BACKUP_RENAME: "Renaming custom volume backup",
    OperationType.CUSTOM_VOLUME_BACKUP_RESTORE: "Restoring custom volume backup",
    OperationType.WARNINGS_PRUNE_RESOLVED: "Pruning resolved warnings",
    OperationType.CLUSTER_MEMBER_EVACUATE: "Evacuating cluster member",
    OperationType.CLUSTER_MEMBER_RESTORE: "Restoring cluster member",
    OperationType.IMAGE_IMPORT: "Importing image",
    OperationType.NETWORK_UPDATE: "Updating network",
}


@dataclass(frozen=True)
class Operation:
    """
    A long-running operation registered by one node of the cluster.
    """
    id: int  # stable database identifier
    uuid: str  # user-visible identifier
    node_address: str  # address of the node the operation is running on
    type: OperationType | int  # bare int for codes unknown to this node

# src/localsight/models/summary.py
"""
Pydantic models for the subset of the kubelet `/stats/summary` payload that
the exporter reads. Field aliases follow the kubelet's JSON keys; the kubelet
leaves out statistics it cannot compute, so every counter defaults to zero.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _KubeletModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # The kubelet sends explicit nulls for stats it has not gathered yet.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class FsStats(_KubeletModel):
    """Filesystem usage: bytes and inodes. Used for ephemeral storage, rootfs, logs and volumes."""

    available_bytes: int = Field(0, ge=0, alias="availableBytes")
    capacity_bytes: int = Field(0, ge=0, alias="capacityBytes")
    used_bytes: int = Field(0, ge=0, alias="usedBytes")
    inodes: int = Field(0, ge=0, alias="inodes", description="Total number of inodes.")
    inodes_free: int = Field(0, ge=0, alias="inodesFree")
    inodes_used: int = Field(0, ge=0, alias="inodesUsed")


class MemoryStats(_KubeletModel):
    """Container memory usage. Memory has no inode concept."""

    available_bytes: int = Field(0, ge=0, alias="availableBytes")
    capacity_bytes: int = Field(0, ge=0, alias="capacityBytes")
    usage_bytes: int = Field(0, ge=0, alias="usageBytes")


class VolumeSummary(FsStats):
    name: str = Field(..., description="Volume name, unique within its pod.")


class ContainerSummary(_KubeletModel):
    name: str = Field(..., description="Container name, unique within its pod.")
    memory: MemoryStats = Field(default_factory=MemoryStats)
    rootfs: FsStats = Field(default_factory=FsStats)
    logs: FsStats = Field(default_factory=FsStats)


class PodReference(_KubeletModel):
    name: str
    namespace: str
    uid: Optional[str] = Field(None, description="Pod UID; not reported by every kubelet version.")


class PodSummary(_KubeletModel):
    pod_ref: PodReference = Field(..., alias="podRef")
    ephemeral_storage: FsStats = Field(default_factory=FsStats, alias="ephemeral-storage")
    containers: List[ContainerSummary] = Field(default_factory=list)
    volumes: List[VolumeSummary] = Field(default_factory=list, alias="volume")


class NodeSummary(_KubeletModel):
    node_name: str = Field("", alias="nodeName")


class Summary(_KubeletModel):
    """Root of one poll response."""

    node: NodeSummary = Field(default_factory=NodeSummary)
    pods: List[PodSummary] = Field(default_factory=list)

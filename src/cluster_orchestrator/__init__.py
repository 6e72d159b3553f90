"""
cluster_orchestrator

This package is the reconciliation core of an orchestrator for three tier
database clusters: a metadata tier, a storage tier and a query tier.

We keep modules small and well separated:
core contains the cluster snapshot, naming rules and errors
control contains the interfaces to the control plane and an in memory backend
member contains one manager per tier
manager contains reclaim policy, identity labels and orphan cleanup
gates contains the readiness checks between tiers
controller contains the reconcile pipeline and its wiring
state contains status merge and change detection
events contains event recorders
source contains cluster sources
runtime contains the worker loop
templates contains declarative manifests
"""

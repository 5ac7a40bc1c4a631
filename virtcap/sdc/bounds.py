# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.
#
# See LICENSE for more details.
#
# Copyright: Red Hat Inc. 2026

"""
Bounds of the resource values a hypervisor accepts.

Each resource type owns one :class:`BoundResolver` strategy answering the
four bound kinds (Minimum, Maximum, Default, Increment) with a fresh
:class:`~virtcap.instance.PropertyBundle`. A strategy method returning
None means the bound is not applicable to the resource type, callers
skip it. Some bounds are policy constants, others need a live query:

    ========== ============ ==================================
    Type       Live bound   Source
    ========== ============ ==================================
    Memory     none         constants, KiloBytes
    Processor  Maximum      max vcpus of the connection
    Network    Maximum      constant (KVM), version based (Xen)
    Disk       Maximum      free space of the referenced pool
    ========== ============ ==================================

A live query that fails raises, a partial bundle is never returned.
"""

import logging

from virtcap import defaults, utils_classname
from virtcap.errors import UnsupportedOperation
from virtcap.instance import PropertyBundle
from virtcap.svpc_types import Backend, BoundKind, ResourceType

LOG = logging.getLogger("avocado." + __name__)


class ResolverContext(object):
    """
    What a strategy may consult: the connection provider, the pool
    provider and the engine configuration
    """

    def __init__(self, connections, pools, config):
        self.connections = connections
        self.pools = pools
        self.config = config


def _quantity_bundle(kind, quantity, units_field=None, units=None):
    props = [("InstanceID", kind.value, "string")]
    if units_field:
        props.append((units_field, units, "string"))
    props.append(("VirtualQuantity", quantity, "uint64"))
    return PropertyBundle(props)


class BoundResolver(object):
    """
    Strategy computing the bounds of one resource type.

    Subclasses override the bound kinds they define. The default
    implementation of each kind is "not applicable".
    """

    RESOURCE_TYPE = ResourceType.UNKNOWN

    # Field name and value of the allocation units, if any
    UNITS_FIELD = None
    UNITS = None

    def _bundle(self, kind, quantity):
        return _quantity_bundle(kind, quantity, self.UNITS_FIELD, self.UNITS)

    def minimum(self, ref, ctx):
        return None

    def maximum(self, ref, ctx):
        return None

    def default(self, ref, ctx):
        return None

    def increment(self, ref, ctx):
        return None

    def resolve(self, kind, ref, ctx):
        """
        Compute one bound

        :param kind: BoundKind to compute
        :param ref: ObjectPath the request is made for
        :param ctx: ResolverContext
        :return: PropertyBundle, or None if the bound is not applicable
        """
        handlers = {
            BoundKind.MINIMUM: self.minimum,
            BoundKind.MAXIMUM: self.maximum,
            BoundKind.DEFAULT: self.default,
            BoundKind.INCREMENT: self.increment,
        }
        LOG.debug("Resolving %s of %s for %s", kind.value,
                  self.RESOURCE_TYPE.name, ref)
        return handlers[kind](ref, ctx)


class MemoryBounds(BoundResolver):

    RESOURCE_TYPE = ResourceType.MEMORY
    UNITS_FIELD = "AllocationUnits"
    UNITS = "KiloBytes"

    MIN = defaults.MEM_MIN
    DEF = defaults.MEM_DEF
    INC = defaults.MEM_INC

    def minimum(self, ref, ctx):
        return self._bundle(BoundKind.MINIMUM, self.MIN)

    def maximum(self, ref, ctx):
        return self._bundle(BoundKind.MAXIMUM, ctx.config.policy("max_mem"))

    def default(self, ref, ctx):
        return self._bundle(BoundKind.DEFAULT, self.DEF)

    def increment(self, ref, ctx):
        return self._bundle(BoundKind.INCREMENT, self.INC)


class ProcessorBounds(BoundResolver):

    RESOURCE_TYPE = ResourceType.PROCESSOR
    UNITS_FIELD = "AllocationUnits"
    UNITS = "Processors"

    def minimum(self, ref, ctx):
        return self._bundle(BoundKind.MINIMUM, defaults.PROC_MIN)

    def maximum(self, ref, ctx):
        with ctx.connections.connect(ref.classname) as conn:
            num_procs = conn.get_max_vcpus()
        LOG.debug("libvirt says %d max vcpus", num_procs)
        return self._bundle(BoundKind.MAXIMUM, num_procs)

    def default(self, ref, ctx):
        return self._bundle(BoundKind.DEFAULT, defaults.PROC_DEF)

    def increment(self, ref, ctx):
        return self._bundle(BoundKind.INCREMENT, defaults.PROC_INC)


class NetworkBounds(BoundResolver):

    RESOURCE_TYPE = ResourceType.NETWORK

    def minimum(self, ref, ctx):
        return self._bundle(BoundKind.MINIMUM, defaults.NET_MIN)

    def _max_kvm(self, ref, ctx):
        return ctx.config.policy("kvm_max_nics")

    def _max_xen(self, ref, ctx):
        with ctx.connections.connect(ref.classname) as conn:
            version = conn.get_version()
        LOG.debug("Hypervisor version=%d", version)
        if version >= ctx.config.policy("xen_nic_version_cutoff"):
            return ctx.config.policy("xen_max_nics")
        return ctx.config.policy("xen_old_max_nics")

    def maximum(self, ref, ctx):
        backend = utils_classname.backend_from_classname(ref.classname)
        if backend == Backend.KVM:
            num_nics = self._max_kvm(ref, ctx)
        elif backend == Backend.XEN:
            num_nics = self._max_xen(ref, ctx)
        else:
            raise UnsupportedOperation("Unsupported hypervisor: '%s'"
                                       % backend.prefix)
        return self._bundle(BoundKind.MAXIMUM, num_nics)

    def default(self, ref, ctx):
        return self._bundle(BoundKind.DEFAULT, defaults.NET_DEF)

    def increment(self, ref, ctx):
        return self._bundle(BoundKind.INCREMENT, defaults.NET_INC)


class DiskBounds(BoundResolver):

    RESOURCE_TYPE = ResourceType.DISK
    UNITS_FIELD = "AllocationQuantity"
    UNITS = "MegaBytes"

    MIN = defaults.DISK_MIN
    DEF = defaults.DISK_DEF
    INC = defaults.DISK_INC

    def minimum(self, ref, ctx):
        return self._bundle(BoundKind.MINIMUM, self.MIN)

    def maximum(self, ref, ctx):
        # The reference names the pool the disk would be allocated from
        pool_id = ref.get_str_key("InstanceID")
        pool = ctx.pools.pool_by_name(ref, pool_id)
        free_space = pool.get_u64_prop("Capacity")
        LOG.debug("Got capacity from pool %s: %d", pool_id, free_space)
        return self._bundle(BoundKind.MAXIMUM, free_space)

    def default(self, ref, ctx):
        return self._bundle(BoundKind.DEFAULT, self.DEF)

    def increment(self, ref, ctx):
        return self._bundle(BoundKind.INCREMENT, self.INC)


_BOUND_RESOLVERS = {
    ResourceType.MEMORY: MemoryBounds(),
    ResourceType.PROCESSOR: ProcessorBounds(),
    ResourceType.NETWORK: NetworkBounds(),
    ResourceType.DISK: DiskBounds(),
}


def get_bound_resolver(res_type):
    """
    :return: the BoundResolver of a resource type, None if it has none
    """
    return _BOUND_RESOLVERS.get(res_type)


__all__ = ["ResolverContext", "BoundResolver", "get_bound_resolver"]

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
Capability resolution and association graph engine.

The engine is the single entry point of the package. It owns no mutable
state: every dependency is handed to the constructor and every request
opens, and closes, the hypervisor connections it needs. One engine may
serve concurrent requests from several threads.

Example::

    from virtcap.engine import CapabilityEngine
    from virtcap.instance import ObjectPath
    from virtcap.utils_config import EngineConfig

    engine = CapabilityEngine.from_config(EngineConfig(provider_prefix="KVM"))
    ref = ObjectPath("KVM_AllocationCapabilities", "root/virt",
                     {"InstanceID": "MemoryPool/0"})
    for inst in engine.associators(ref):
        print(inst["InstanceID"], inst["VirtualQuantity"])
"""

import logging

from virtcap import utils_classname
from virtcap.assoc import ALL_EDGES
from virtcap.assoc.base import edge_matches, filter_results
from virtcap.errors import InvalidIdentifier
from virtcap.instance import InstanceFactory
from virtcap.pool_membership import PoolMembershipResolver
from virtcap.providers import virsh
from virtcap.sdc import ResolverContext, sdc_rasd_inst
from virtcap.utils_config import EngineConfig
from virtcap.vssd import VSSDGenerator

LOG = logging.getLogger("avocado." + __name__)


class CapabilityEngine(object):

    def __init__(self, connections, devices, pools, instances=None,
                 config=None, edges=ALL_EDGES):
        """
        :param connections: ConnectionProvider
        :param devices: DeviceProvider
        :param pools: PoolProvider
        :param instances: InstanceFactory, the default one if None
        :param config: EngineConfig, the defaults if None
        :param edges: the association edges the engine resolves
        """
        self._config = config or EngineConfig()
        self._connections = connections
        self._devices = devices
        self._pools = pools
        self._instances = instances or InstanceFactory()
        self._edges = tuple(edges)
        self._context = ResolverContext(connections, pools, self._config)
        self._membership = PoolMembershipResolver(connections, devices, pools)
        self._vssd = VSSDGenerator(connections, self._instances)

    @classmethod
    def from_config(cls, config):
        """
        Create an engine querying the host through virsh
        """
        instances = InstanceFactory()
        connections = virsh.VirshConnectionProvider(config)
        return cls(connections,
                   virsh.VirshDeviceProvider(instances),
                   virsh.VirshPoolProvider(connections, instances),
                   instances, config)

    @property
    def provider_prefix(self):
        return self._config.provider_prefix

    @property
    def connections(self):
        return self._connections

    @property
    def pools(self):
        return self._pools

    @property
    def instances(self):
        return self._instances

    @property
    def resolver_context(self):
        return self._context

    @property
    def membership(self):
        return self._membership

    @property
    def vssd(self):
        return self._vssd

    def resolve_capability_instance(self, backend, res_type, kind, ref):
        """
        Resolve one bound of a resource type into a capability instance.

        :param backend: Backend the request is made for, it must be the one
                        of ``ref``
        :param res_type: ResourceType
        :param kind: BoundKind
        :param ref: ObjectPath the request is made for
        :return: Instance, or None if the bound is not applicable
        """
        ref_backend = utils_classname.backend_from_classname(ref.classname)
        if ref_backend != backend:
            raise InvalidIdentifier("Reference %s is not a %s class"
                                    % (ref.classname, backend.prefix))
        return sdc_rasd_inst(self._instances, ref, res_type, kind,
                             self._context)

    def resolve_association(self, edge, ref, info=None):
        """
        Compute the instances on the other side of ``edge``

        :param edge: AssociationEdge whose source classes hold ``ref``
        :param ref: ObjectPath of the source
        :param info: AssocInfo filter of the caller, may be None
        :return: list of Instance
        """
        if ref.classname not in edge.source_classes:
            raise InvalidIdentifier("%s is not a source of %s"
                                    % (ref.classname, edge.assoc_classes[0]))
        LOG.debug("Resolving %s from %s", edge.target_prop, ref)
        return filter_results(edge.handler(self, ref, info), info)

    def find_edges(self, ref, info=None):
        return [edge for edge in self._edges if edge_matches(edge, ref, info)]

    def associators(self, ref, info=None):
        """
        Get the instances associated with ``ref`` through every edge
        """
        insts = []
        for edge in self.find_edges(ref, info):
            insts.extend(self.resolve_association(edge, ref, info))
        return insts

    def references(self, ref, info=None):
        """
        Get the association instances linking ``ref`` to its associates
        """
        refs = []
        for edge in self.find_edges(ref, info):
            for target in self.resolve_association(edge, ref, info):
                refs.append(edge.make_ref(self, ref, target, info, edge))
        return refs

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
ResourceAllocationFromPool: the pool a resource allocation setting draws
from, and the settings drawing from a pool.
"""

import logging

from virtcap import utils_classname
from virtcap.assoc.base import make_edge, match_hypervisor_prefix, typed_classes
from virtcap.errors import InvalidIdentifier, NotFound
from virtcap.svpc_types import ResourceType

LOG = logging.getLogger("avocado." + __name__)

ASSOC_BASE = "ResourceAllocationFromPool"


def rasd_to_pool(engine, ref, info):
    if not match_hypervisor_prefix(ref, info, engine.provider_prefix):
        return []

    res_type = utils_classname.rasd_type_from_classname(ref.classname)
    rasd_id = ref.get_str_key("InstanceID")
    pool_id = engine.membership.owning_pool(ref.classname, res_type, rasd_id)

    with engine.connections.connect(ref.classname) as conn:
        pool = engine.pools.pool_by_id(conn, pool_id, ref.classname,
                                       ref.namespace)
    if pool is None:
        raise NotFound("Unable to find pool `%s'" % pool_id)
    return [pool]


def pool_to_rasd(engine, ref, info):
    if not match_hypervisor_prefix(ref, info, engine.provider_prefix):
        return []

    pool_id = ref.get_str_key("InstanceID")
    res_type = utils_classname.res_type_from_pool_id(pool_id)
    if res_type == ResourceType.UNKNOWN:
        raise InvalidIdentifier("Invalid InstanceID or unsupported pool "
                                "type: `%s'" % pool_id)

    rasds = engine.membership.settings_in_pool(ref, res_type, pool_id)
    LOG.debug("%d settings draw from %s", len(rasds), pool_id)
    return rasds


_PREFIXES = ("Xen", "KVM")

_ANTECEDENT = typed_classes(
    ["ProcessorPool", "MemoryPool", "NetworkPool", "DiskPool"], _PREFIXES)
_DEPENDENT = typed_classes([
    "DiskResourceAllocationSettingData",
    "MemResourceAllocationSettingData",
    "NetResourceAllocationSettingData",
    "ProcResourceAllocationSettingData",
], _PREFIXES)
_ASSOC_CLASSES = typed_classes([ASSOC_BASE], _PREFIXES)


EDGES = (
    make_edge(_DEPENDENT, "Dependent", _ANTECEDENT, "Antecedent",
              _ASSOC_CLASSES, rasd_to_pool),
    make_edge(_ANTECEDENT, "Antecedent", _DEPENDENT, "Dependent",
              _ASSOC_CLASSES, pool_to_rasd),
)

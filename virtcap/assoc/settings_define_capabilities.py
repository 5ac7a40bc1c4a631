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
SettingsDefineCapabilities: which settings define a set of capabilities.

    * AllocationCapabilities -> the Minimum, Maximum, Default and Increment
      settings of the pool's resource type
    * VirtualSystemMigrationCapabilities <-> VirtualSystemMigrationSettingData
    * VirtualSystemManagementCapabilities -> the default
      VirtualSystemSettingData profiles
"""

import logging

from virtcap import migration, utils_classname
from virtcap.assoc.base import (make_edge, make_ref_valuerole,
                                match_hypervisor_prefix, typed_classes)
from virtcap.errors import InvalidIdentifier, UnsupportedOperation
from virtcap.sdc import sdc_rasds_for_type
from virtcap.svpc_types import ResourceType

LOG = logging.getLogger("avocado." + __name__)

ASSOC_BASE = "SettingsDefineCapabilities"


def alloc_cap_to_rasd(engine, ref, info):
    if not match_hypervisor_prefix(ref, info, engine.provider_prefix):
        return []

    pool_id = ref.get_str_key("InstanceID")
    res_type = utils_classname.res_type_from_pool_id(pool_id)
    if res_type == ResourceType.UNKNOWN:
        raise InvalidIdentifier("Unable to determine resource type of `%s'"
                                % pool_id)

    insts = sdc_rasds_for_type(engine.instances, ref, res_type,
                               engine.resolver_context)
    for inst in insts:
        inst.set_property("PoolID", pool_id, "string")
    return insts


def rasd_to_alloc_cap(engine, ref, info):
    raise UnsupportedOperation("Not supported: %s to AllocationCapabilities"
                               % ref.classname)


def migrate_cap_to_vsmsd(engine, ref, info):
    if not match_hypervisor_prefix(ref, info, engine.provider_prefix):
        return []

    migration.get_migration_caps(engine.instances, ref, validate=True)
    return [migration.get_migration_sd(engine.instances, ref, validate=False)]


def vsmsd_to_migrate_cap(engine, ref, info):
    if not match_hypervisor_prefix(ref, info, engine.provider_prefix):
        return []

    migration.get_migration_sd(engine.instances, ref, validate=True)
    return [migration.get_migration_caps(engine.instances, ref,
                                         validate=False)]


def vsmc_to_vssd(engine, ref, info):
    if not match_hypervisor_prefix(ref, info, engine.provider_prefix):
        return []
    return engine.vssd.vssds_for(ref)


_GROUP_COMPONENT = typed_classes(["AllocationCapabilities"])
_PART_COMPONENT = typed_classes([
    "DiskResourceAllocationSettingData",
    "MemResourceAllocationSettingData",
    "NetResourceAllocationSettingData",
    "ProcResourceAllocationSettingData",
])
_ASSOC_CLASSES = typed_classes([ASSOC_BASE])
_MIGRATE_CAP = typed_classes([migration.MIGRATION_CAPS_BASE])
_MIGRATE_SD = typed_classes([migration.MIGRATION_SD_BASE])
_VSMC = typed_classes(["VirtualSystemManagementCapabilities"])
_VSSD = typed_classes(["VirtualSystemSettingData"])


EDGES = (
    make_edge(_GROUP_COMPONENT, "GroupComponent",
              _PART_COMPONENT, "PartComponent",
              _ASSOC_CLASSES, alloc_cap_to_rasd, make_ref_valuerole),
    make_edge(_PART_COMPONENT, "PartComponent",
              _GROUP_COMPONENT, "GroupComponent",
              _ASSOC_CLASSES, rasd_to_alloc_cap),
    make_edge(_MIGRATE_CAP, "GroupComponent",
              _MIGRATE_SD, "PartComponent",
              _ASSOC_CLASSES, migrate_cap_to_vsmsd),
    make_edge(_MIGRATE_SD, "PartComponent",
              _MIGRATE_CAP, "GroupComponent",
              _ASSOC_CLASSES, vsmsd_to_migrate_cap),
    make_edge(_VSMC, "GroupComponent",
              _VSSD, "PartComponent",
              _ASSOC_CLASSES, vsmc_to_vssd),
)

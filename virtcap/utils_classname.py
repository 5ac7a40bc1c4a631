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
Class-name and identifier taxonomy.

Class names look like ``<Prefix>_<Base>`` (e.g. ``KVM_DiskPool``), pool
identifiers like ``<PoolType>Pool/<suffix>`` and setting identifiers like
``<domain>/<device>``. These helpers decode such strings once into the
enumerations of :mod:`virtcap.svpc_types`.
"""

import logging

from virtcap.errors import InvalidIdentifier
from virtcap.svpc_types import Backend, ResourceType

LOG = logging.getLogger("avocado." + __name__)

_RASD_BASES = {
    ResourceType.PROCESSOR: "ProcResourceAllocationSettingData",
    ResourceType.MEMORY: "MemResourceAllocationSettingData",
    ResourceType.NETWORK: "NetResourceAllocationSettingData",
    ResourceType.DISK: "DiskResourceAllocationSettingData",
}

_POOL_PREFIXES = (
    ("ProcessorPool", ResourceType.PROCESSOR),
    ("MemoryPool", ResourceType.MEMORY),
    ("NetworkPool", ResourceType.NETWORK),
    ("DiskPool", ResourceType.DISK),
)

# Device tokens of the settings that have no device name of their own
PROC_DEVICE_ID = "proc"
MEM_DEVICE_ID = "mem"


def class_prefix_name(classname):
    """
    Get the prefix of a class name, e.g. 'KVM' for 'KVM_DiskPool'

    :return: the prefix or None if the class name carries none
    """
    if not classname or "_" not in classname:
        return None
    prefix = classname.split("_", 1)[0]
    return prefix or None


def class_base_name(classname):
    """
    Get the class name without its hypervisor prefix
    """
    if classname and "_" in classname:
        return classname.split("_", 1)[1]
    return classname


def backend_from_classname(classname):
    """
    Decode the hypervisor backend from a class name.

    :raise InvalidIdentifier: if the prefix names no known backend
    """
    prefix = class_prefix_name(classname)
    for backend in Backend:
        if backend.prefix == prefix:
            return backend
    raise InvalidIdentifier("Unknown hypervisor prefix in class `%s'"
                            % classname)


def get_typed_class(refcn, new_base):
    """
    Build the name of the class ``new_base`` for the backend of ``refcn``
    """
    prefix = class_prefix_name(refcn)
    if prefix is None:
        raise InvalidIdentifier("Invalid class `%s'" % refcn)
    return "%s_%s" % (prefix, new_base)


def rasd_type_from_classname(classname):
    """
    Get the resource type of a resource allocation setting data class

    :raise InvalidIdentifier: if the class is no known RASD class
    """
    base = class_base_name(classname)
    for res_type, rasd_base in _RASD_BASES.items():
        if base == rasd_base:
            return res_type
    raise InvalidIdentifier("Unable to determine RASD type of `%s'"
                            % classname)


def rasd_classname_from_type(res_type):
    """
    Get the base class name of the settings of a resource type

    :raise InvalidIdentifier: if the resource type has no settings class
    """
    try:
        return _RASD_BASES[res_type]
    except KeyError:
        raise InvalidIdentifier("Resource type %s not known" % res_type)


def res_type_from_pool_id(pool_id):
    """
    Classify a pool identifier by its recognized prefix.

    :return: the resource type, ResourceType.UNKNOWN if the prefix is not
             one of the four pool prefixes
    """
    if pool_id:
        for prefix, res_type in _POOL_PREFIXES:
            if pool_id.startswith(prefix):
                return res_type
    return ResourceType.UNKNOWN


def pool_base_from_type(res_type):
    """
    Get the pool class base name of a resource type, e.g. 'DiskPool'
    """
    for prefix, pool_type in _POOL_PREFIXES:
        if pool_type == res_type:
            return prefix
    raise InvalidIdentifier("No pool class for resource type %s" % res_type)


def parse_fq_devid(devid):
    """
    Split a fully qualified device identifier ``<domain>/<device>``

    :return: tuple (domain name, device name)
    """
    if not devid or "/" not in devid:
        raise InvalidIdentifier("Invalid device identifier `%s'" % devid)
    dom_name, dev_name = devid.split("/", 1)
    if not dom_name or not dev_name:
        raise InvalidIdentifier("Invalid device identifier `%s'" % devid)
    return dom_name, dev_name


def make_fq_devid(dom_name, dev_name):
    return "%s/%s" % (dom_name, dev_name)

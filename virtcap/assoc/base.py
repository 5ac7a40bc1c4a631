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
Declarative association edges.

An association relates two sets of classes in one direction, every
direction is an :class:`AssociationEdge`: the classes a reference may
belong to, the role it plays, the classes and role on the other side, the
association classes the edge implements, a handler computing the other
side and a reference builder producing the association instance for each
result. Edges are created once, at import time, and never change.
"""

import logging

from virtcap import utils_classname
from virtcap.instance import Instance
from virtcap.svpc_types import PropertyPolicy, ValueRange, ValueRole

LOG = logging.getLogger("avocado." + __name__)

# The prefix of the classes that may name any hypervisor's class
GENERIC_PREFIX = "CIM"


class AssociationEdge(object):
    """
    One direction of an association.

    :param source_classes: frozenset of class names a reference may have
    :param source_prop: role of the reference
    :param target_classes: frozenset of class names of the results
    :param target_prop: role of the results
    :param assoc_classes: tuple of association class names
    :param handler: callable(engine, ref, info) -> [Instance]
    :param make_ref: callable(engine, ref, target, info, edge) -> Instance
    """

    def __init__(self, source_classes, source_prop, target_classes,
                 target_prop, assoc_classes, handler, make_ref):
        self.source_classes = source_classes
        self.source_prop = source_prop
        self.target_classes = target_classes
        self.target_prop = target_prop
        self.assoc_classes = assoc_classes
        self.handler = handler
        self.make_ref = make_ref

    def __repr__(self):
        return "AssociationEdge(%s: %s -> %s)" % (
            self.assoc_classes[0], self.source_prop, self.target_prop)


class AssocInfo(object):
    """
    The filter a caller puts on an association request.

    Every unset criterion matches anything.
    """

    def __init__(self, assoc_class=None, result_class=None, role=None,
                 result_role=None):
        self.assoc_class = assoc_class
        self.result_class = result_class
        self.role = role
        self.result_role = result_role

    def __repr__(self):
        return ("AssocInfo(assoc_class=%r, result_class=%r, role=%r, "
                "result_role=%r)" % (self.assoc_class, self.result_class,
                                     self.role, self.result_role))


def make_edge(source_classes, source_prop, target_classes, target_prop,
              assoc_classes, handler, make_ref=None):
    return AssociationEdge(frozenset(source_classes), source_prop,
                           frozenset(target_classes), target_prop,
                           tuple(assoc_classes), handler,
                           make_ref or make_reference)


def typed_classes(bases, prefixes=("Xen", "KVM", "LXC")):
    """
    Spell out ``<Prefix>_<Base>`` for every base and prefix
    """
    return ["%s_%s" % (prefix, base) for prefix in prefixes for base in bases]


# Generic ancestors of the typed class bases, besides the base itself
_GENERIC_PARENTS = {
    "ProcResourceAllocationSettingData": ("ResourceAllocationSettingData",
                                          "SettingData"),
    "MemResourceAllocationSettingData": ("ResourceAllocationSettingData",
                                         "SettingData"),
    "NetResourceAllocationSettingData": ("ResourceAllocationSettingData",
                                         "SettingData"),
    "DiskResourceAllocationSettingData": ("ResourceAllocationSettingData",
                                          "SettingData"),
    "VirtualSystemSettingData": ("SettingData",),
    "VirtualSystemMigrationSettingData": ("SettingData",),
    "ProcessorPool": ("ResourcePool",),
    "MemoryPool": ("ResourcePool",),
    "NetworkPool": ("ResourcePool",),
    "DiskPool": ("ResourcePool",),
    "AllocationCapabilities": ("Capabilities",),
    "VirtualSystemManagementCapabilities": ("Capabilities",),
    "VirtualSystemMigrationCapabilities": ("Capabilities",),
    "SettingsDefineCapabilities": ("Component",),
    "ResourceAllocationFromPool": ("Dependency",),
}


def _class_matches(classname, wanted):
    """
    Check a class name against a caller supplied class name.

    A generic ``CIM_`` class stands for the classes of the same base and
    for the classes derived from it.
    """
    if wanted is None or classname == wanted:
        return True
    if utils_classname.class_prefix_name(wanted) != GENERIC_PREFIX:
        return False
    wanted_base = utils_classname.class_base_name(wanted)
    base = utils_classname.class_base_name(classname)
    return wanted_base == base or wanted_base in _GENERIC_PARENTS.get(base, ())


def match_hypervisor_prefix(ref, info, provider_prefix=None):
    """
    Check that a request is meant for the hypervisor serving it.

    :param ref: ObjectPath of the request
    :param info: AssocInfo of the caller, may be None
    :param provider_prefix: prefix of the acting provider, None for any
    :return: False if any named class belongs to another hypervisor
    """
    ref_pfx = utils_classname.class_prefix_name(ref.classname)
    if provider_prefix and ref_pfx != provider_prefix:
        return False
    if info is None:
        return True
    for classname in (info.assoc_class, info.result_class):
        if not classname:
            continue
        pfx = utils_classname.class_prefix_name(classname)
        if pfx != GENERIC_PREFIX and pfx != ref_pfx:
            return False
    return True


def edge_matches(edge, ref, info):
    """
    Check if ``edge`` applies to ``ref`` under the caller filter ``info``
    """
    if ref.classname not in edge.source_classes:
        return False
    if info is None:
        return True
    if info.assoc_class and not any(
            _class_matches(cn, info.assoc_class) for cn in edge.assoc_classes):
        return False
    if info.role and info.role != edge.source_prop:
        return False
    if info.result_role and info.result_role != edge.target_prop:
        return False
    return True


def filter_results(insts, info):
    """
    Drop the instances that are not of the caller's result class
    """
    if info is None or not info.result_class:
        return list(insts)
    return [inst for inst in insts
            if _class_matches(inst.classname, info.result_class)]


def assoc_classname(edge, source_ref):
    """
    Pick the association class of ``edge`` for the hypervisor of the source
    """
    prefix = utils_classname.class_prefix_name(source_ref.classname)
    for classname in edge.assoc_classes:
        if utils_classname.class_prefix_name(classname) == prefix:
            return classname
    base = utils_classname.class_base_name(edge.assoc_classes[0])
    return utils_classname.get_typed_class(source_ref.classname, base)


def make_reference(engine, source_ref, target_inst, info, edge):
    """
    Build the association instance linking the source and a target
    """
    ref_inst = Instance(assoc_classname(edge, source_ref),
                        source_ref.namespace)
    ref_inst.set_property(edge.source_prop, source_ref, "reference")
    ref_inst.set_property(edge.target_prop, target_inst.path, "reference")
    return ref_inst


# Tokens recognized in a capability InstanceID, in precedence order
_VALUE_RANGE_TOKENS = (
    ("Default", ValueRange.POINT),
    ("Increment", ValueRange.INCREMENTS),
    ("Maximum", ValueRange.MAXIMUMS),
    ("Minimum", ValueRange.MINIMUMS),
)


def classify_value_range(iid):
    """
    Classify a capability InstanceID by the bound name it contains.

    :return: ValueRange, or None if the identifier names no bound
    """
    for token, value_range in _VALUE_RANGE_TOKENS:
        if token in iid:
            return value_range
    return None


def make_ref_valuerole(engine, source_ref, target_inst, info, edge):
    """
    Build the association instance and annotate it with the role of the
    target in the source's range of values.
    """
    ref_inst = make_reference(engine, source_ref, target_inst, info, edge)

    iid = target_inst.get_property("InstanceID")
    if not isinstance(iid, str):
        LOG.debug("Target instance does not have an InstanceID")
        return ref_inst

    value_role = ValueRole.SUPPORTED
    value_range = classify_value_range(iid)
    if value_range is None:
        LOG.debug("Unknown default RASD type: `%s'", iid)
    else:
        if value_range == ValueRange.POINT:
            value_role = ValueRole.DEFAULT
        ref_inst.set_property("ValueRange", int(value_range), "uint16")

    ref_inst.set_property("ValueRole", int(value_role), "uint16")
    ref_inst.set_property("PropertyPolicy", int(PropertyPolicy.INDEPENDENT),
                          "uint16")
    return ref_inst

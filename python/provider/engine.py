"""Plan/apply engine: drives resource lifecycles from configuration and state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from common.logger import get_logger
from provider.config import DATA, BlockConfig
from provider.diagnostics import Diagnostics
from provider.provider import KeystoreProvider
from provider.state import StateDocument, StateFile

CREATE = "create"
UPDATE = "update"
REPLACE = "replace"
DELETE = "delete"
NOOP = "noop"


@dataclass
class PlannedChange:
    address: str
    type_name: str
    action: str
    config: Optional[dict[str, Any]] = None
    replace_paths: list[str] = field(default_factory=list)


@dataclass
class Plan:
    changes: list[PlannedChange] = field(default_factory=list)
    data_sources: list[BlockConfig] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def count(self, action: str) -> int:
        return sum(1 for c in self.changes if c.action == action)

    def summary(self) -> str:
        add = self.count(CREATE) + self.count(REPLACE)
        change = self.count(UPDATE)
        destroy = self.count(DELETE) + self.count(REPLACE)
        return f"Plan: {add} to add, {change} to change, {destroy} to destroy."


@dataclass
class ApplyResult:
    plan: Plan
    state: StateDocument
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    written: bool = False


class Engine:
    """Compute and execute planned changes against one state file."""

    def __init__(self, provider: KeystoreProvider, state_file: StateFile):
        self.provider = provider
        self.state_file = state_file

    def plan(self, blocks: list[BlockConfig], state: Optional[StateDocument] = None) -> Plan:
        log = get_logger(__name__)
        if state is None:
            state = self.state_file.read()
        plan = Plan()
        prior_resources = state.get("resources", {})
        seen = set()

        for block in sorted(blocks, key=lambda b: b.address):
            seen.add(block.address)

            if block.mode == DATA:
                ds = self.provider.data_source(block.type_name)
                plan.diagnostics.extend(ds.schema().validate_config(block.attributes))
                plan.data_sources.append(block)
                continue

            res = self.provider.resource(block.type_name)
            schema = res.schema()
            block_diags = schema.validate_config(block.attributes)
            plan.diagnostics.extend(block_diags)
            if block_diags.has_error():
                continue

            config = schema.normalize(block.attributes)
            prior = prior_resources.get(block.address)
            if prior is None:
                plan.changes.append(PlannedChange(block.address, block.type_name, CREATE, config))
                continue

            replace_paths = res.requires_replace(config, prior["attributes"])
            if replace_paths:
                action = REPLACE
            elif res.has_changes(config, prior["attributes"]):
                action = UPDATE
            else:
                action = NOOP
            plan.changes.append(PlannedChange(block.address, block.type_name, action, config, replace_paths))

        supported = set(self.provider.resource_types())
        for address in sorted(set(prior_resources) - seen):
            type_name = prior_resources[address].get("type")
            if type_name not in supported:
                plan.diagnostics.add_error(
                    "Unsupported resource in state",
                    f'{address} has type "{type_name}", which this provider cannot delete.',
                )
                continue
            plan.changes.append(PlannedChange(address, type_name, DELETE))

        log.debug("engine: plan ok changes=%d %s", len(plan.changes), plan.summary())
        return plan

    def _apply_change(self, change: PlannedChange, resources: dict[str, Any], diags: Diagnostics) -> None:
        log = get_logger(__name__)
        res = self.provider.resource(change.type_name)
        prior = resources.get(change.address)
        log.debug("engine: apply start address=%s action=%s", change.address, change.action)

        if change.action == NOOP:
            resp = res.read(prior["attributes"])
        elif change.action == CREATE:
            resp = res.create(change.config)
        elif change.action == UPDATE:
            resp = res.update(change.config, prior["attributes"])
        elif change.action == REPLACE:
            # Create the replacement first so a failure leaves the prior object in state.
            resp = res.create(change.config)
            if not resp.diagnostics.has_error():
                delete_resp = res.delete(prior["attributes"])
                resp.diagnostics.extend(delete_resp.diagnostics)
        elif change.action == DELETE:
            resp = res.delete(prior["attributes"])
            diags.extend(resp.diagnostics)
            if not resp.diagnostics.has_error():
                del resources[change.address]
            return
        else:
            raise ValueError(f"unknown action {change.action}")

        diags.extend(resp.diagnostics)
        if resp.state is not None and not resp.diagnostics.has_error():
            resources[change.address] = {"type": change.type_name, "attributes": resp.state}
        elif resp.diagnostics.has_error():
            log.warning("engine: apply failed address=%s action=%s", change.address, change.action)

    def apply(self, blocks: list[BlockConfig]) -> ApplyResult:
        log = get_logger(__name__)
        state = self.state_file.read()
        plan = self.plan(blocks, state)
        result = ApplyResult(plan=plan, state=state)
        if plan.diagnostics.has_error():
            result.diagnostics.extend(plan.diagnostics)
            return result

        resources = {k: dict(v) for k, v in state.get("resources", {}).items()}
        for change in plan.changes:
            self._apply_change(change, resources, result.diagnostics)

        data = {}
        for block in plan.data_sources:
            ds = self.provider.data_source(block.type_name)
            resp = ds.read(ds.schema().normalize(block.attributes))
            result.diagnostics.extend(resp.diagnostics)
            if resp.state is not None:
                data[block.address] = {"type": block.type_name, "attributes": resp.state}

        new_state = dict(state)
        new_state["resources"] = resources
        new_state["data"] = data
        if new_state != state:
            result.state = self.state_file.write(new_state)
            result.written = True
        log.info(
            "engine: apply done %s errors=%d written=%s",
            plan.summary(),
            len(result.diagnostics.errors()),
            result.written,
        )
        return result

    def destroy(self) -> ApplyResult:
        """Delete every resource recorded in state."""
        return self.apply([])


"""
Entity-Component-System Core
=============================
Data-driven ECS using integer entity IDs and component dictionaries.

Iteration order is creation order, which the combat rules depend on
("first unit in the collection" means the oldest live unit).
"""

from typing import Dict, Set, Type, TypeVar, Optional, Iterator, Tuple, Any


# Type variable for component types
C = TypeVar('C')


class World:
    """
    The ECS World manages all entities and their components.

    Entities are integer IDs. Components are stored in dictionaries
    keyed by entity ID, with one dict per component type. Destruction is
    two-phase: destroy_entity() marks, process_dead_entities() compacts.
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Dict[int, None] = {}  # Ordered set
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Set[int] = set()  # Marked for removal

    def create_entity(self) -> int:
        """Create a new entity and return its ID."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities[entity_id] = None
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for destruction (processed at end of tick)."""
        if entity_id in self._entities:
            self._dead_entities.add(entity_id)

    def process_dead_entities(self) -> int:
        """Remove all entities marked for destruction. Returns the count."""
        removed = 0
        for entity_id in self._dead_entities:
            if entity_id in self._entities:
                del self._entities[entity_id]
                # Remove all components for this entity
                for component_store in self._components.values():
                    if entity_id in component_store:
                        del component_store[entity_id]
                removed += 1
        self._dead_entities.clear()
        return removed

    def add_component(self, entity_id: int, component: Any) -> None:
        """Add a component to an entity."""
        component_type = type(component)
        if component_type not in self._components:
            self._components[component_type] = {}
        self._components[component_type][entity_id] = component

    def remove_component(self, entity_id: int, component_type: Type[C]) -> None:
        """Remove a component from an entity."""
        if component_type in self._components:
            if entity_id in self._components[component_type]:
                del self._components[component_type][entity_id]

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        if component_type in self._components:
            return self._components[component_type].get(entity_id)
        return None

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        """Check if an entity has a specific component."""
        if component_type in self._components:
            return entity_id in self._components[component_type]
        return False

    def query(self, *component_types: Type) -> Iterator[Tuple[int, ...]]:
        """
        Query for all entities that have ALL specified component types.

        Yields tuples of (entity_id, component1, component2, ...) in
        creation order. Entities marked dead are skipped, including ones
        marked while the query is being consumed. Entities created during
        the query are not visited.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            if component_type not in self._components:
                return
            stores.append(self._components[component_type])

        # Snapshot candidates so systems may spawn entities mid-query
        candidates = [
            entity_id for entity_id in self._entities
            if all(entity_id in store for store in stores)
        ]

        for entity_id in candidates:
            if entity_id in self._dead_entities:
                continue
            if not all(entity_id in store for store in stores):
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def get_entities_with(self, *component_types: Type) -> Iterator[int]:
        """Get all entity IDs that have all specified components."""
        for result in self.query(*component_types):
            yield result[0]

    def entity_count(self) -> int:
        """Return the number of active entities."""
        return len(self._entities) - len(self._dead_entities)

    def is_alive(self, entity_id: int) -> bool:
        """Check if an entity is alive (exists and not marked for death)."""
        return entity_id in self._entities and entity_id not in self._dead_entities

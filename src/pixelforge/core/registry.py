"""
Kernel registration system.

Maps each NodeKind to the single kernel that implements it, plus a
decorator for easy kernel registration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Type

from pixelforge.core.node import NodeKind

if TYPE_CHECKING:
    from pixelforge.core.kernels import Kernel


class KernelRegistry:
    """
    Global registry of node kernels.

    Kernels are stateless, so one shared instance per kind is kept.

    Usage:
        # Register a kernel class
        KernelRegistry.register(MixKernel)

        # Or use the decorator
        @register_kernel
        class MixKernel(Kernel):
            kind = NodeKind.MIX
            ...

        # Look up the kernel for a node
        kernel = KernelRegistry.get(node.kind)
    """

    _registry: dict[NodeKind, Kernel] = {}
    _categories: dict[str, list[NodeKind]] = {}

    @classmethod
    def register(cls, kernel_class: Type[Kernel]) -> Type[Kernel]:
        """
        Register a kernel class.

        Args:
            kernel_class: The kernel class to register

        Returns:
            The registered class (for decorator use)

        Raises:
            ValueError: If another kernel class already handles the kind
        """
        kind = kernel_class.kind
        existing = cls._registry.get(kind)
        if existing is not None and type(existing).__qualname__ != kernel_class.__qualname__:
            raise ValueError(
                f"Kind {kind.value} already handled by {type(existing).__name__}"
            )

        cls._registry[kind] = kernel_class()

        category = getattr(kernel_class, "category", "Utility")
        if category not in cls._categories:
            cls._categories[category] = []
        if kind not in cls._categories[category]:
            cls._categories[category].append(kind)

        return kernel_class

    @classmethod
    def unregister(cls, kind: NodeKind) -> bool:
        """
        Unregister the kernel for a kind.

        Returns:
            True if unregistered, False if not found
        """
        kernel = cls._registry.pop(kind, None)
        if kernel is None:
            return False

        kinds = cls._categories.get(kernel.category, [])
        if kind in kinds:
            kinds.remove(kind)
        return True

    @classmethod
    def get(cls, kind: NodeKind | str) -> Kernel | None:
        """
        Get the kernel for a kind.

        Args:
            kind: NodeKind, or a raw tag (unknown tags return None)

        Returns:
            Kernel instance or None if not registered
        """
        if not isinstance(kind, NodeKind):
            parsed = NodeKind.parse(kind)
            if parsed is None:
                return None
            kind = parsed
        return cls._registry.get(kind)

    @classmethod
    def get_categories(cls) -> dict[str, list[NodeKind]]:
        """Get kinds organized by category."""
        return {cat: list(kinds) for cat, kinds in cls._categories.items()}

    @classmethod
    def list_all(cls) -> list[NodeKind]:
        """List all registered kinds."""
        return list(cls._registry.keys())

    @classmethod
    def missing_kinds(cls) -> list[NodeKind]:
        """Kinds declared in NodeKind that have no kernel."""
        return [kind for kind in NodeKind if kind not in cls._registry]

    @classmethod
    def ensure_complete(cls) -> None:
        """
        Check that every NodeKind has a kernel.

        Raises:
            RuntimeError: Listing the kinds without a kernel
        """
        missing = cls.missing_kinds()
        if missing:
            names = ", ".join(kind.value for kind in missing)
            raise RuntimeError(f"No kernel registered for node kinds: {names}")

    @classmethod
    def get_kernel_info(cls, kind: NodeKind) -> dict | None:
        """
        Get metadata about a registered kernel.

        Returns:
            Dictionary with kernel info or None if not found
        """
        kernel = cls._registry.get(kind)
        if kernel is None:
            return None

        return {
            "kind": kind.value,
            "name": kernel.name or kind.value,
            "category": kernel.category,
            "description": kernel.description,
            "inputs": [p.name for p in kernel.inputs],
            "outputs": [p.name for p in kernel.outputs],
            "params": dict(kernel.param_defaults),
        }


def register_kernel(cls: Type[Kernel]) -> Type[Kernel]:
    """
    Decorator to register a kernel class.

    Usage:
        @register_kernel
        class MixKernel(Kernel):
            kind = NodeKind.MIX
            ...
    """
    return KernelRegistry.register(cls)

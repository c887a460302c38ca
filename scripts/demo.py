#!/usr/bin/env python3
"""
Demo script for swr-cache.

This script walks through a profile page being opened, revisited and
refreshed, plus the collection cache and image memo. Everything runs in
memory; no Redis is needed.
"""

from swr_cache import CacheContainer, QueryDescriptor
from swr_cache.logging_config import configure_logging
from swr_cache.repositories import InMemoryQueryTransport, MemorySlotStorage, StaticIdentityProvider


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def build_container(transport: InMemoryQueryTransport, session: MemorySlotStorage) -> CacheContainer:
    """Build a container the way a page load would."""
    return CacheContainer(
        transport=transport,
        identity=StaticIdentityProvider(viewer_id=None),
        session_storage=session,
        origin_storage=MemorySlotStorage(),
    )


def demo_profile_revalidation() -> None:
    """Demonstrate first visit, revisit and background refresh."""
    print_section("Profile: first visit, revisit, refresh")

    transport = InMemoryQueryTransport()
    session = MemorySlotStorage()
    container = build_container(transport, session)

    view = container.full_profile_view("anna")
    view.subscribe(lambda snap: print(f"  🔁 re-render: {snap.data.follower_count if snap.data else None} followers"))

    print("\n📭 First visit (cache empty):")
    print(f"  {view.mount()}")

    print("\n📡 Sources resolve one by one:")
    transport.publish(QueryDescriptor.of("getUserByUsername", username="anna"), {"id": "u1", "name": "Anna"})
    print(f"  after user only: is_loading={view.snapshot().is_loading}")
    transport.publish(QueryDescriptor.of("getFollowerCount", user_id="u1"), 3)
    transport.publish(QueryDescriptor.of("getFollowingCount", user_id="u1"), 5)
    print(f"  {view.snapshot()}")
    view.unmount()

    print("\n🔄 Page reload: a new container reads the persisted table")
    reloaded = build_container(InMemoryQueryTransport(), session)
    with reloaded.full_profile_view("anna") as again:
        print(f"  served from cache: {again.snapshot()}")
        print(f"  state: {again.state.value}")


def demo_collections() -> None:
    """Demonstrate named list caching."""
    print_section("Collections")

    container = build_container(InMemoryQueryTransport(), MemorySlotStorage())
    container.collections.set_posts("feed", [{"id": "p1"}, {"id": "p2"}])
    print(f"\n  feed: {container.collections.get_posts('feed')}")
    print(f"  profile:u1: {container.collections.get_posts('profile:u1')}")
    container.collections.clear_cache()
    print(f"  after clear: {container.collections.get_posts('feed')}")


def demo_image_memo() -> None:
    """Demonstrate recognition of rotated URLs."""
    print_section("Image memo")

    container = build_container(InMemoryQueryTransport(), MemorySlotStorage())
    memo = container.image_memo
    first = "https://demo.convex.cloud/api/storage/xyz?token=a"
    rotated = "https://demo.convex.cloud/api/storage/xyz?token=b"

    print(f"\n  before load: placeholder={memo.placeholder_for(first) is not None}")
    memo.mark_loaded(first)
    print(f"  rotated URL already loaded: {memo.is_loaded(rotated)}")
    print(f"  URLs for xyz: {memo.urls_for('xyz')}")


def main() -> None:
    """Run all demos."""
    configure_logging(level="WARNING")
    demo_profile_revalidation()
    demo_collections()
    demo_image_memo()
    print("\n✓ Done")


if __name__ == "__main__":
    main()

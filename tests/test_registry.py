"""Tests for waypoint.registry — route registration and traversal logging."""

from typing import Any

import pytest

from waypoint.errors import ConfigurationError, InvalidNameError, NameConflictError
from waypoint.naming.events import TraversalEvent
from waypoint.registry import RouteRegistry, flatten_handlers
from waypoint.urls.builder import UrlBuilder


class FakeDispatcher:
    """Records every registration forwarded by the registry."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []

    def add(self, method: str, path: str, handlers: tuple[Any, ...]) -> None:
        self.calls.append((method, path, handlers))


def _middleware(request: Any, next: Any) -> Any:
    return next(request)


def _list(request: Any) -> str:
    return "list"


def _save(request: Any) -> str:
    return "save"


class TestFlattenHandlers:
    def test_flat(self) -> None:
        assert flatten_handlers([1, 2]) == [1, 2]

    def test_nested(self) -> None:
        assert flatten_handlers([1, [2, (3, [4])], 5]) == [1, 2, 3, 4, 5]

    def test_empty(self) -> None:
        assert flatten_handlers([]) == []


class TestDispatch:
    @pytest.fixture
    def dispatcher(self) -> FakeDispatcher:
        dispatcher = FakeDispatcher()
        registry = RouteRegistry(dispatcher)
        registry.use("/just-middleware", _middleware)
        registry.use("/named-middleware", _middleware, name="middleware")
        registry.use("/named-middlewares", _middleware, _middleware, name="middlewares")
        registry.all("/forAll*", _middleware)
        registry.get("/", _list, name="list")
        registry.post("/:title/save", _save, name="save")
        return dispatcher

    def test_use_forwarded(self, dispatcher: FakeDispatcher) -> None:
        assert ("use", "/just-middleware", (_middleware,)) in dispatcher.calls
        assert ("use", "/named-middleware", (_middleware,)) in dispatcher.calls
        assert ("use", "/named-middlewares", (_middleware, _middleware)) in dispatcher.calls

    def test_all_forwarded(self, dispatcher: FakeDispatcher) -> None:
        assert ("all", "/forAll*", (_middleware,)) in dispatcher.calls

    def test_get_and_post_forwarded(self, dispatcher: FakeDispatcher) -> None:
        assert ("get", "/", (_list,)) in dispatcher.calls
        assert ("post", "/:title/save", (_save,)) in dispatcher.calls

    def test_call_order(self, dispatcher: FakeDispatcher) -> None:
        assert [c[0] for c in dispatcher.calls] == ["use", "use", "use", "all", "get", "post"]

    @pytest.mark.parametrize("method", ["put", "patch", "delete", "head", "options"])
    def test_other_methods(self, method: str) -> None:
        dispatcher = FakeDispatcher()
        registry = RouteRegistry(dispatcher)
        getattr(registry, method)("/x", _list, name="x")
        assert dispatcher.calls == [(method, "/x", (_list,))]
        assert registry.build().patterns() == {"x": "/x"}

    def test_nested_handler_lists_flattened(self) -> None:
        dispatcher = FakeDispatcher()
        registry = RouteRegistry(dispatcher)
        registry.get("/x", [_middleware, [_middleware]], _list)
        assert dispatcher.calls == [("get", "/x", (_middleware, _middleware, _list))]

    def test_no_dispatcher(self) -> None:
        registry = RouteRegistry()
        registry.get("/x", _list, name="x")
        assert registry.build().patterns() == {"x": "/x"}


class TestEvents:
    def test_unnamed_routes_emit_nothing(self) -> None:
        registry = RouteRegistry()
        registry.use("/just-middleware", _middleware)
        registry.all("/forAll*", _middleware)
        assert registry.events == ()

    def test_named_route_emits_enter_exit(self) -> None:
        registry = RouteRegistry()
        registry.get("/", _list, name="list")
        assert registry.events == (
            TraversalEvent.enter("list", "/"),
            TraversalEvent.exit("list", "/"),
        )

    def test_events_snapshot(self) -> None:
        registry = RouteRegistry()
        snapshot = registry.events
        registry.get("/", _list, name="list")
        assert snapshot == ()

    def test_table(self) -> None:
        registry = RouteRegistry()
        registry.use("/just-middleware", _middleware)
        registry.use("/named-middleware", _middleware, name="middleware")
        registry.get("/", _list, name="list")
        registry.post("/:title/save", _save, name="save")

        assert registry.build().patterns() == {
            "middleware": "/named-middleware",
            "list": "/",
            "save": "/:title/save",
        }


class TestInvalidNames:
    @pytest.mark.parametrize("name", ["has space", "slash/name", "q?"])
    def test_rejected(self, name: str) -> None:
        registry = RouteRegistry()
        with pytest.raises(InvalidNameError):
            registry.get("/x", _list, name=name)

    def test_nothing_recorded_on_rejection(self) -> None:
        dispatcher = FakeDispatcher()
        registry = RouteRegistry(dispatcher)
        with pytest.raises(InvalidNameError):
            registry.get("/x", _list, name="bad name")
        assert registry.events == ()
        assert dispatcher.calls == []

    def test_invalid_name_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RouteRegistry().add_mapping("bad name", "/x")


class TestMounting:
    def _articles(self) -> RouteRegistry:
        articles = RouteRegistry()
        articles.get("/", _list, name="list")
        articles.get("/:title", _list, name="detail")
        articles.post("/:title", _middleware, _save, name="save")
        articles.get("/category/:category", _list, name="list-category")
        return articles

    def test_mounted_children_prefixed(self) -> None:
        root = RouteRegistry()
        root.mount("/articles", self._articles(), name="article")

        assert root.build().patterns() == {
            "article.list": "/articles",
            "article.detail": "/articles/:title",
            "article.save": "/articles/:title",
            "article.list-category": "/articles/category/:category",
        }

    def test_mount_point_not_in_table(self) -> None:
        root = RouteRegistry()
        root.mount("/articles", self._articles(), name="article")
        assert "article" not in root.build()

    def test_mount_forwards_child_to_dispatcher(self) -> None:
        dispatcher = FakeDispatcher()
        root = RouteRegistry(dispatcher)
        articles = self._articles()
        root.mount("/articles", articles, _middleware, name="article")
        assert dispatcher.calls == [("use", "/articles", (_middleware, articles))]

    def test_use_with_registry_as_last_handler(self) -> None:
        root = RouteRegistry()
        root.use("/articles", _middleware, self._articles(), name="article")
        assert root.build()["article.detail"].pattern == "/articles/:title"

    def test_registry_not_last_is_not_spliced(self) -> None:
        root = RouteRegistry()
        root.use("/articles", self._articles(), _middleware, name="article")
        assert root.build().patterns() == {"article": "/articles"}

    def test_deep_nesting(self) -> None:
        leaf = RouteRegistry()
        leaf.get("/:id", _list, name="detail")
        middle = RouteRegistry()
        middle.mount("/items", leaf, name="item")
        middle.get("/", _list, name="home")
        root = RouteRegistry()
        root.mount("/shop", middle, name="shop")

        assert root.build().patterns() == {
            "shop.item.detail": "/shop/items/:id",
            "shop.home": "/shop",
        }

    def test_pass_through_mount(self) -> None:
        api = RouteRegistry()
        api.get("/users", _list, name="users")
        root = RouteRegistry()
        root.mount("/", api, name="api")
        assert root.build().patterns() == {"api.users": "/users"}

    def test_empty_name_mount(self) -> None:
        api = RouteRegistry()
        api.get("/users", _list, name="users")
        root = RouteRegistry()
        root.mount("/api", api, name="")
        assert root.build().patterns() == {"users": "/api/users"}

    def test_mount_rejects_non_registry(self) -> None:
        with pytest.raises(TypeError, match="RouteRegistry"):
            RouteRegistry().mount("/x", _list)  # type: ignore[arg-type]

    def test_lookalike_not_spliced(self) -> None:
        class LooksLikeARegistry:
            events = (TraversalEvent.enter("x", "/x"), TraversalEvent.exit("x", "/x"))

            def __call__(self, request: Any) -> str:
                return "x"

        root = RouteRegistry()
        root.use("/mount", LooksLikeARegistry(), name="mount")
        assert root.build().patterns() == {"mount": "/mount"}

    def test_child_conflict_detected(self) -> None:
        a = RouteRegistry()
        a.get("/x", _list, name="same")
        b = RouteRegistry()
        b.get("/y", _list, name="same")
        root = RouteRegistry()
        root.mount("/", a, name="")
        root.mount("/", b, name="")
        with pytest.raises(NameConflictError):
            root.build()


class TestAddMapping:
    def test_mappings(self) -> None:
        dispatcher = FakeDispatcher()
        registry = RouteRegistry(dispatcher)
        registry.add_mapping("reg.all", "/reg/*")
        registry.add_mapping("reg.product", "/reg/:id")
        registry.add_mapping("reg.product.all", "/reg/:id/*")

        assert registry.build().patterns() == {
            "reg.all": "/reg/*",
            "reg.product": "/reg/:id",
            "reg.product.all": "/reg/:id/*",
        }
        assert dispatcher.calls == []


class TestRouteDecorator:
    def test_registers_and_returns_handler(self) -> None:
        dispatcher = FakeDispatcher()
        registry = RouteRegistry(dispatcher)

        @registry.route("/:slug", name="detail")
        def detail(request: Any) -> str:
            return "detail"

        assert detail(None) == "detail"
        assert dispatcher.calls == [("get", "/:slug", (detail,))]
        assert registry.build().patterns() == {"detail": "/:slug"}

    def test_multiple_methods_single_entry(self) -> None:
        dispatcher = FakeDispatcher()
        registry = RouteRegistry(dispatcher)

        @registry.route("/form", methods=["GET", "POST"], name="form")
        def form(request: Any) -> str:
            return "form"

        assert [c[0] for c in dispatcher.calls] == ["get", "post"]
        assert registry.events == (
            TraversalEvent.enter("form", "/form"),
            TraversalEvent.exit("form", "/form"),
        )


class TestBuild:
    def test_build_once(self) -> None:
        registry = RouteRegistry()
        registry.get("/", _list, name="list")
        registry.build()
        with pytest.raises(ConfigurationError, match="already been built"):
            registry.build()

    def test_register_after_build(self) -> None:
        registry = RouteRegistry()
        registry.build()
        with pytest.raises(ConfigurationError, match="after the route table has been built"):
            registry.get("/late", _list, name="late")

    def test_table_property(self) -> None:
        registry = RouteRegistry()
        assert registry.table is None
        assert registry.built is False
        table = registry.build()
        assert registry.table is table
        assert registry.built is True

    def test_empty_registry(self) -> None:
        assert len(RouteRegistry().build()) == 0

    def test_url_builder_builds_on_demand(self) -> None:
        registry = RouteRegistry()
        registry.get("/articles/:slug", _list, name="article")
        urls = registry.url_builder()
        assert isinstance(urls, UrlBuilder)
        assert registry.built is True
        assert urls.url_for("article", {"slug": "hello"}) == "/articles/hello"

    def test_url_builder_reuses_table(self) -> None:
        registry = RouteRegistry()
        registry.get("/", _list, name="home")
        table = registry.build()
        assert registry.url_builder().table is table
        assert registry.url_builder().table is table


class TestEndToEnd:
    def test_modular_application(self) -> None:
        credit_cards = RouteRegistry()
        credit_cards.get("/", _list, name="list")
        credit_cards.get("/:slug", _list, name="detail")
        credit_cards.post("/:slug/ajukan", _middleware, _save, name="apply")

        root = RouteRegistry(FakeDispatcher())
        root.all("/me*", _middleware)
        root.mount("/kartu-kredit", credit_cards, name="creditCard")

        urls = root.url_builder()
        urls.set_base_url("https://example.com")

        assert urls.url_for("creditCard.list") == "/kartu-kredit"
        assert urls.url_for("creditCard.list", {}, {"issuer": "abc"}) == "/kartu-kredit?issuer=abc"
        assert urls.url_for("creditCard.detail", {"slug": "myCard"}) == "/kartu-kredit/myCard"
        assert urls.url_for("creditCard.apply", {"slug": "myCard"}) == "/kartu-kredit/myCard/ajukan"
        assert (
            urls.absolute_url_for("creditCard.detail", {"slug": "myCard"}, {"no-layout": True})
            == "https://example.com/kartu-kredit/myCard?no-layout=true"
        )

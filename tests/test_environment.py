"""Tests for Environment configuration, the function registry and the façade."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

import pagelet
from pagelet import (
    BUILTINS,
    Environment,
    ErrorCode,
    FunctionRegistry,
    Template,
    TemplateError,
    TemplateRuntimeError,
)


class TestEnvironmentOptions:
    def test_defaults(self):
        env = Environment()
        assert env.autoescape is True
        assert env.strict is False
        assert env.max_depth == 64
        assert env.cache_size == 400

    @pytest.mark.parametrize("depth", [0, -1])
    def test_invalid_max_depth(self, depth):
        with pytest.raises(ValueError, match="max_depth"):
            Environment(max_depth=depth)

    def test_invalid_cache_size(self):
        with pytest.raises(ValueError, match="cache_size"):
            Environment(cache_size=-1)

    def test_environments_are_isolated(self):
        first, second = Environment(), Environment()
        first.add_function("only_here", lambda: "yes")
        assert "only_here" in first.functions
        assert "only_here" not in second.functions
        assert second.render("{{ only_here() }}") == "[Error: unknown only_here()]"


class TestFunctionRegistration:
    def test_add_function(self, env):
        env.add_function("double", lambda n: n * 2)
        assert env.render("{{ double(5) }}") == "10"

    def test_variadic_function(self, env):
        env.add_function("total", lambda *xs: sum(xs))
        assert env.render("{{ total(1, 2, 3) }}") == "6"

    def test_function_receives_evaluated_arguments(self, env):
        received = []
        env.add_function("capture", lambda *args: received.extend(args) or "")
        env.render('{{ capture(a.b, "s", 3, eq(1, 1)) }}', {"a": {"b": [1]}})
        assert received == [[1], "s", 3, True]

    def test_function_as_pipe(self, env):
        env.add_function("wrap", lambda s, left, right: f"{left}{s}{right}")
        assert env.render('{{ t | wrap("[", "]") }}', {"t": "x"}) == "[x]"

    def test_decorator(self, env):
        @env.function()
        def shout(text):
            return f"{text}!"

        assert env.render("{{ shout(word) }}", word="hey") == "hey!"
        assert shout("direct") == "direct!"

    def test_decorator_with_name(self, env):
        @env.function("initials")
        def make_initials(name):
            return "".join(part[0] for part in name.split())

        assert env.render("{{ author | initials }}", author="Ada Lovelace") == "AL"

    def test_override_builtin(self, env):
        env.add_function("uppercase", lambda s: f"<{s}>")
        assert env.render("{{ uppercase(x) }}", x="a") == "&lt;a&gt;"

    def test_override_does_not_touch_builtins_table(self, env):
        original = BUILTINS["eq"]
        env.add_function("eq", lambda a, b: "custom")
        assert BUILTINS["eq"] is original
        assert Environment().render("{{ eq(1, 1) }}") == "true"

    def test_host_results_are_formatted(self, env):
        env.add_function("nothing", lambda: None)
        env.add_function("items", lambda: [1, 2])
        assert env.render("[{{ nothing() }}]") == "[]"
        assert env.render("{{ items() }}") == "[Error: use #each for arrays]"
        assert env.render("{{#each items() as i}}{{ i }}{{/each}}") == "12"

    def test_host_functions_see_no_short_circuit(self, env):
        calls = []
        env.add_function("probe", lambda value: calls.append(value) or value)
        env.add_function("first_of", lambda a, b: a)
        env.render("{{ first_of(1, probe(2)) }}")
        assert calls == [2]

    @pytest.mark.parametrize("name", ["", "bad-name", "has space", "dotted.name", "emoji🙂"])
    def test_invalid_names(self, env, name):
        with pytest.raises(ValueError, match="Invalid function name"):
            env.add_function(name, lambda: None)

    def test_non_callable(self, env):
        with pytest.raises(TypeError, match="must be callable"):
            env.add_function("x", "not a function")

    def test_overriding_is_logged(self, env, caplog):
        with caplog.at_level(logging.DEBUG, logger="pagelet.environment.registry"):
            env.add_function("trim", lambda s: s)
        assert "Overriding template function 'trim'" in caplog.text


class TestFunctionRegistry:
    def test_is_dict_like(self, env):
        registry = env.functions
        assert isinstance(registry, FunctionRegistry)
        assert "eq" in registry
        assert len(registry) == len(BUILTINS)
        assert set(registry) == set(BUILTINS)
        assert set(registry.keys()) == set(BUILTINS)
        assert registry.get("missing") is None
        assert registry["eq"] is BUILTINS["eq"]

    def test_setitem(self, env):
        env.functions["square"] = lambda n: n * n
        assert env.render("{{ square(4) }}") == "16"

    def test_update(self, env):
        env.functions.update({"one": lambda: 1, "two": lambda: 2})
        assert env.render("{{ one() }}{{ two() }}") == "12"

    def test_update_is_all_or_nothing(self, env):
        with pytest.raises(TypeError):
            env.functions.update({"good": lambda: 1, "bad": 42})
        assert "good" not in env.functions

    def test_delitem(self, env):
        del env.functions["eq"]
        assert env.render("{{ eq(1, 1) }}") == "[Error: unknown eq()]"

    def test_delitem_missing(self, env):
        with pytest.raises(KeyError):
            del env.functions["missing"]

    def test_copy_is_independent(self, env):
        copied = env.functions.copy()
        env.functions["late"] = lambda: 1
        assert "late" not in copied

    def test_mutation_replaces_table(self, env):
        snapshot = env.functions.snapshot()
        env.functions["late"] = lambda: 1
        assert "late" not in snapshot
        assert "late" in env.functions.snapshot()

    def test_items(self, env):
        assert dict(env.functions.items()).keys() == BUILTINS.keys()


class TestHostFunctionFailures:
    @staticmethod
    def boom(*args):
        raise RuntimeError("kaboom")

    def test_failure_renders_inline(self, env):
        env.add_function("boom", self.boom)
        assert env.render("a{{ boom() }}b") == "a[Error: boom() failed]b"

    def test_failure_is_logged(self, env, caplog):
        env.add_function("boom", self.boom)
        with caplog.at_level(logging.WARNING, logger="pagelet.environment.registry"):
            env.render("{{ boom(1) }}")
        assert "boom() raised RuntimeError: kaboom" in caplog.text

    def test_failure_does_not_abort_siblings(self, env):
        env.add_function("boom", self.boom)
        source = "{{#each xs as x}}{{ x }}{{ boom() }};{{/each}}"
        assert env.render(source, {"xs": [1, 2]}) == (
            "1[Error: boom() failed];2[Error: boom() failed];"
        )

    def test_strict_mode_raises(self, env_strict):
        env_strict.add_function("boom", self.boom)
        with pytest.raises(TemplateRuntimeError) as excinfo:
            env_strict.render("{{ boom() }}")
        error = excinfo.value
        assert error.function_name == "boom"
        assert error.code is ErrorCode.FUNCTION_ERROR
        assert isinstance(error.__cause__, RuntimeError)
        assert "P-RUN-001" in str(error)
        assert "boom()" in str(error)

    def test_strict_mode_keeps_inline_template_errors(self, env_strict):
        assert env_strict.render("{{ missing() }}") == "[Error: unknown missing()]"
        assert env_strict.render("{{ eq(1) }}") == "[Error: eq() needs 2 args]"

    def test_error_hierarchy(self):
        assert issubclass(TemplateRuntimeError, TemplateError)
        assert ErrorCode.FUNCTION_ERROR.category == "runtime"


class TestTemplates:
    def test_from_string_returns_template(self, env):
        template = env.from_string("Hi {{ name }}")
        assert isinstance(template, Template)
        assert template.source == "Hi {{ name }}"
        assert template.environment is env
        assert template.render(name="x") == "Hi x"

    def test_template_is_callable(self, env):
        template = env.from_string("{{ a }}")
        assert template({"a": 1}) == "1"
        assert template(a=2) == "2"
        assert template() == ""

    def test_non_mapping_data(self, env):
        with pytest.raises(TypeError, match="must be a mapping"):
            env.from_string("x").render(["not", "a", "mapping"])

    def test_render_is_pure(self, env, data):
        template = env.from_string("{{#each tags as t, i}}{{ i }}{{ t }}{{/each}}")
        assert template(data) == template(data)

    def test_functions_registered_later_are_visible(self, env):
        template = env.from_string("{{ late() }}")
        assert template() == "[Error: unknown late()]"
        env.add_function("late", lambda: "now")
        assert template() == "now"

    def test_variables(self, env):
        template = env.from_string(
            "{{ title }}{{#each tags as t, i}}{{ t }}{{ i }}{{ sep }}{{/each}}"
            "{{#if eq(a.b, 1)}}{{ c | default(d) }}{{/if}}"
        )
        assert template.variables == {"title", "tags", "sep", "a", "c", "d"}

    def test_nodes(self, env):
        assert env.from_string("text").nodes == env.parse("text")

    def test_repr(self, env):
        assert repr(env.from_string("a{{ b }}")) == "<Template 2 nodes>"


class TestTemplateCache:
    def test_cached_by_source(self, env):
        assert env.from_string("{{ x }}") is env.from_string("{{ x }}")
        assert env.cache_info == {"size": 1, "max_size": 400}

    def test_cache_disabled(self):
        env = Environment(cache_size=0)
        assert env.from_string("{{ x }}") is not env.from_string("{{ x }}")
        assert env.cache_info["size"] == 0

    def test_lru_eviction(self):
        env = Environment(cache_size=2)
        first = env.from_string("a")
        env.from_string("b")
        env.from_string("a")
        env.from_string("c")
        assert env.cache_info["size"] == 2
        assert env.from_string("a") is first

    def test_clear_cache(self, env):
        template = env.from_string("x")
        env.clear_cache()
        assert env.cache_info["size"] == 0
        assert env.from_string("x") is not template


class TestConcurrency:
    def test_concurrent_renders(self, env):
        template = env.from_string("{{#each xs as x}}{{ x }}-{{ n }};{{/each}}")

        def work(n):
            return template.render({"xs": [n, n + 1], "n": n})

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, range(200)))
        assert results == [f"{n}-{n};{n + 1}-{n};" for n in range(200)]

    def test_registration_during_renders(self, env):
        template = env.from_string("{{ eq(1, 1) }}")
        stop = threading.Event()

        def register():
            i = 0
            while not stop.is_set():
                env.add_function(f"f{i % 50}", lambda: i)
                i += 1

        writer = threading.Thread(target=register)
        writer.start()
        try:
            with ThreadPoolExecutor(max_workers=4) as pool:
                results = list(pool.map(lambda _: template(), range(500)))
        finally:
            stop.set()
            writer.join()
        assert set(results) == {"true"}

    def test_concurrent_from_string(self, env):
        with ThreadPoolExecutor(max_workers=8) as pool:
            templates = list(pool.map(lambda i: env.from_string(f"{{{{ v{i % 10} }}}}"), range(100)))
        assert all(isinstance(t, Template) for t in templates)
        assert env.cache_info["size"] == 10


class TestModuleFacade:
    """pagelet.compile / render / register_function over the default environment."""

    def test_render(self, default_env):
        assert pagelet.render("Hello, {{ name }}!", {"name": "World"}) == "Hello, World!"

    def test_render_keywords(self, default_env):
        assert pagelet.render("{{ a }}", a="kw") == "kw"

    def test_compile(self, default_env):
        card = pagelet.compile("<b>{{ title }}</b>")
        assert card({"title": "Docs & Guides"}) == "<b>Docs &amp; Guides</b>"
        assert card({"title": "Other"}) == "<b>Other</b>"

    def test_render_equals_compile_then_call(self, default_env, data):
        source = "{{ title | lowercase }}: {{ join(tags, ' ') }}"
        assert pagelet.render(source, data) == pagelet.compile(source)(data)

    def test_register_function(self, default_env):
        pagelet.register_function("add", lambda a, b: a + b)
        assert pagelet.render("{{ add(2, 3) }}") == "5"
        assert default_env is pagelet.get_default_environment()

    def test_register_function_validates(self, default_env):
        with pytest.raises(TypeError):
            pagelet.register_function("x", None)

    def test_version(self):
        assert pagelet.__version__ == "0.1.0"

# tests/application/services/test_template_renderer.py
from application.services.template_renderer import RenderSources, TemplateRenderer


class TestTemplateRenderer:
    def test_render_environment_variable(self):
        renderer = TemplateRenderer()
        src = RenderSources(env_vars={"host": "api.local"})

        assert renderer.render("https://{{host}}/users", src) == "https://api.local/users"

    def test_collection_variable_shadows_environment(self):
        renderer = TemplateRenderer()
        src = RenderSources(collection_vars={"token": "fresh"}, env_vars={"token": "stale"})

        assert renderer.render("Bearer {{token}}", src) == "Bearer fresh"

    def test_process_env_namespace(self):
        renderer = TemplateRenderer()
        src = RenderSources(env_vars={"HOME": "env"}, process_env={"HOME": "/home/ci"})

        assert renderer.render("{{process.env.HOME}}", src) == "/home/ci"

    def test_unknown_placeholder_is_left_untouched(self):
        renderer = TemplateRenderer()

        assert renderer.render('{"a": "{{missing}}"}', RenderSources()) == '{"a": "{{missing}}"}'

    def test_whitespace_inside_braces_is_ignored(self):
        renderer = TemplateRenderer()

        assert renderer.render("{{ id }}", RenderSources(env_vars={"id": "7"})) == "7"

    def test_nested_reference_is_expanded(self):
        renderer = TemplateRenderer()
        src = RenderSources(env_vars={"base": "http://{{host}}", "host": "example.org"})

        assert renderer.render("{{base}}/x", src) == "http://example.org/x"

    def test_self_reference_stops_at_max_depth(self):
        renderer = TemplateRenderer()
        src = RenderSources(env_vars={"loop": "{{loop}}"})

        assert renderer.render("{{loop}}", src) == "{{loop}}"

    def test_non_string_values_are_stringified(self):
        renderer = TemplateRenderer()
        src = RenderSources(collection_vars={"flag": True, "count": 3, "ids": [1, 2], "none": None})

        assert renderer.render("{{flag}} {{count}} {{ids}}", src) == "true 3 [1, 2]"
        assert renderer.render("{{none}}", src) == "{{none}}"

    def test_render_none_is_empty_string(self):
        assert TemplateRenderer().render(None, RenderSources()) == ""

    def test_render_dict(self):
        renderer = TemplateRenderer()
        src = RenderSources(env_vars={"k": "X-Key", "v": "abc"})

        assert renderer.render_dict({"{{k}}": "{{v}}"}, src) == {"X-Key": "abc"}

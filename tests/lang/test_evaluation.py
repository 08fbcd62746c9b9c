"""Tests for evaluating manifests against scopes, environments and catalogs."""

from __future__ import annotations

import pytest

from pinclude.exceptions import EvaluationError
from pinclude.lang.environment import Environment
from pinclude.lang.parser import ManifestParser
from pinclude.lang.scope import Scope


def _evaluate(environment: Environment, scope: Scope, text: str) -> Scope:
    ManifestParser(environment).parse_string(text, "/site/eval.pp").evaluate(scope)
    return scope


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        pytest.param("1 + 2 * 3", 7, id="precedence"),
        pytest.param("(1 + 2) * 3", 9, id="parentheses"),
        pytest.param("7 / 2", 3, id="integer-division"),
        pytest.param("7.0 / 2", 3.5, id="float-division"),
        pytest.param("'10' + 5", 15, id="numeric-string"),
        pytest.param("10 - -5", 15, id="negative-literal"),
        pytest.param("'Web' == 'web'", True, id="case-insensitive-equality"),
        pytest.param("1 != 2", True, id="inequality"),
        pytest.param("3 >= 3 and 2 < 1", False, id="and"),
        pytest.param("false or 2 > 1", True, id="or"),
        pytest.param("!''", True, id="empty-string-is-false"),
        pytest.param("!undef", True, id="undef-is-false"),
        pytest.param("'b' in ['a', 'B']", True, id="in-array"),
        pytest.param("'ell' in 'hello'", True, id="in-string"),
        pytest.param("'k' in { 'k' => 1 }", True, id="in-hash-keys"),
        pytest.param("[10, 20, 30][1]", 20, id="array-index"),
        pytest.param("[10, 20][5]", None, id="array-index-out-of-range"),
        pytest.param("{ 'a' => { 'b' => 'deep' } }['a']['b']", "deep", id="nested-hash-index"),
    ],
)
def test_expressions(environment: Environment, scope: Scope, expression: str, expected: object) -> None:
    _evaluate(environment, scope, f"$result = {expression}\n")
    assert scope.lookup("result") == expected


@pytest.mark.parametrize(
    ("expression", "message"),
    [
        pytest.param("1 / 0", "Division by zero", id="division-by-zero"),
        pytest.param("'abc' + 1", "Expected a number", id="non-numeric"),
        pytest.param("true + 1", "Expected a number", id="boolean-arithmetic"),
        pytest.param("1 in 5", "'in' expects", id="bad-in"),
        pytest.param("'abc'[0]", "Cannot index", id="index-string"),
        pytest.param("{ [1] => 2 }", "Hash keys", id="bad-hash-key"),
        pytest.param("nosuchfn(1)", "Unknown function nosuchfn", id="unknown-function"),
        pytest.param("notice('x')", "does not return a value", id="statement-as-value"),
    ],
)
def test_expression_errors(environment: Environment, scope: Scope, expression: str, message: str) -> None:
    with pytest.raises(EvaluationError, match=message):
        _evaluate(environment, scope, f"$result = {expression}\n")


def test_rvalue_function_as_statement_is_rejected(environment: Environment, scope: Scope) -> None:
    with pytest.raises(EvaluationError, match="must be the value of a statement"):
        _evaluate(environment, scope, "member([1], 1)\n")


def test_conditionals_share_enclosing_scope(environment: Environment, scope: Scope) -> None:
    _evaluate(
        environment,
        scope,
        """
        $os = 'debian'
        if $os == 'redhat' { $pkg = 'httpd' }
        elsif $os == 'debian' { $pkg = 'apache2' }
        else { $pkg = 'unknown' }
        unless $os == 'debian' { $other = 1 } else { $other = 2 }
        """,
    )

    assert scope.lookup_local("pkg") == "apache2"
    assert scope.lookup_local("other") == 2


def test_interpolation_of_undef_and_booleans(environment: Environment, scope: Scope) -> None:
    _evaluate(environment, scope, '$u = undef\n$t = true\n$s = "[${u}] [${t}]"\n')

    assert scope.lookup("s") == "[] [true]"


def test_reassignment_in_same_scope_is_an_error(environment: Environment, scope: Scope) -> None:
    with pytest.raises(EvaluationError) as excinfo:
        _evaluate(environment, scope, "$x = 1\n$x = 2\n")

    assert "previously set at /site/eval.pp:1" in str(excinfo.value)
    assert excinfo.value.line == 2


def test_unknown_variable_is_an_error(environment: Environment, scope: Scope) -> None:
    with pytest.raises(EvaluationError, match=r"Unknown variable '\$ghost'"):
        _evaluate(environment, scope, "$x = $ghost\n")


def test_define_instances_get_their_own_scope(environment: Environment, scope: Scope) -> None:
    _evaluate(
        environment,
        scope,
        """
        $shared = 'top'
        define app::instance($port, $owner = "svc-${title}") {
            $inner = "${shared}:${port}"
            file { "/srv/${name}.conf": content => $inner, owner => $owner }
        }
        app::instance { 'alpha': port => 8080 }
        app::instance { 'beta': port => 9090, owner => 'root', require => 'Package[x]' }
        """,
    )

    resources = {resource.ref: resource for resource in scope.catalog.resources}
    assert resources["File[/srv/alpha.conf]"].parameters == {"content": "top:8080", "owner": "svc-alpha"}
    assert resources["File[/srv/beta.conf]"].parameters == {"content": "top:9090", "owner": "root"}
    assert resources["App::Instance[beta]"].parameters["require"] == "Package[x]"
    assert not scope.is_local("inner")


def test_define_rejects_unknown_and_missing_parameters(environment: Environment, scope: Scope) -> None:
    _evaluate(environment, scope, "define needs($value) { }\n")

    with pytest.raises(EvaluationError, match="Must pass value"):
        _evaluate(environment, scope, "needs { 'a': }\n")
    with pytest.raises(EvaluationError, match="Invalid parameter bogus"):
        _evaluate(environment, scope, "needs { 'b': value => 1, bogus => 2 }\n")


def test_duplicate_resource_declaration(environment: Environment, scope: Scope) -> None:
    with pytest.raises(EvaluationError, match=r"Duplicate declaration: File\[/tmp/a\]"):
        _evaluate(environment, scope, "file { '/tmp/a': }\nfile { '/tmp/a': }\n")


def test_invalid_resource_title(environment: Environment, scope: Scope) -> None:
    with pytest.raises(EvaluationError, match="Invalid title"):
        _evaluate(environment, scope, "file { undef: }\n")


def test_classes_evaluate_once_under_top_scope(environment: Environment, scope: Scope) -> None:
    _evaluate(
        environment,
        scope,
        """
        class ntp($server = 'pool.ntp.org') {
            $conf = "server ${server}"
            service { 'ntpd': ensure => running }
        }
        include ntp
        include ntp
        $copied = $ntp::conf
        """,
    )

    assert scope.catalog.classes == ["ntp"]
    assert [resource.ref for resource in scope.catalog.resources] == ["Class[ntp]", "Service[ntpd]"]
    assert scope.lookup("copied") == "server pool.ntp.org"
    assert scope.lookup("ntp::server") == "pool.ntp.org"
    assert not scope.is_local("conf")


def test_including_unknown_class(environment: Environment, scope: Scope) -> None:
    with pytest.raises(EvaluationError, match="Could not find class missing"):
        _evaluate(environment, scope, "include missing\n")


def test_qualified_lookup_of_unevaluated_class(environment: Environment, scope: Scope) -> None:
    with pytest.raises(EvaluationError, match="has not been evaluated"):
        _evaluate(environment, scope, "$x = $nope::var\n")


def test_redefinition_from_another_location(environment: Environment, scope: Scope) -> None:
    parser = ManifestParser(environment)
    parser.parse_string("define thing { }\n", "/site/one.pp")
    parser.parse_string("define thing { }\n", "/site/one.pp")

    with pytest.raises(EvaluationError, match="Duplicate definition: thing"):
        parser.parse_string("define thing { }\n", "/site/two.pp")

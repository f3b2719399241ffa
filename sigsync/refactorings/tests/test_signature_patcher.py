import pytest
from sigsync.refactorings.change_signature import (
    ChangeDescriptor, ParameterDescriptor, SignaturePatcher, ValVar, Visibility
)
from sigsync.result import PatchStatus
from sigsync.tree import NodeKind, SyntaxParseError


@pytest.fixture
def patcher(tree):
    return SignaturePatcher(tree, implicit_return_type='Unit')


def _same(name, type_text, index, **kwargs):
    return ParameterDescriptor(name, type_text, old_name=name, old_index=index, **kwargs)


class TestRename:
    def test_function_rename(self, patcher, parse_site):
        site = parse_site('fun foo(x: Int): Int')
        descriptor = ChangeDescriptor().rename('bar').set_parameters([_same('x', 'Int', 0)])

        result = patcher.apply(site, descriptor)

        assert result.status == PatchStatus.SUCCESS
        assert site.text() == 'fun bar(x: Int): Int'

    def test_constructor_rename_leaves_class_name(self, patcher, parse_site):
        site = parse_site('class C(val x: Int)')
        result = patcher.apply(site, ChangeDescriptor().rename('D'))
        assert result.applied_steps == []
        assert site.text() == 'class C(val x: Int)'

    def test_keyword_name_leaves_tree_untouched(self, patcher, parse_site):
        site = parse_site('fun foo(x: Int)')
        with pytest.raises(SyntaxParseError):
            patcher.apply(site, ChangeDescriptor().rename('class'))
        assert site.text() == 'fun foo(x: Int)'

    def test_unchanged_name_is_same_node(self, patcher, parse_site):
        site = parse_site('fun foo(x: Int)')
        identifier = site.name_identifier()
        patcher.apply(site, ChangeDescriptor().set_return_type('Long'))
        assert site.name_identifier() == identifier
        assert site.name() == 'foo'

    def test_invalid_name_leaves_tree_untouched(self, patcher, parse_site):
        site = parse_site('fun foo(x: Int)')
        descriptor = ChangeDescriptor().rename('not valid').set_return_type('Long')
        with pytest.raises(SyntaxParseError):
            patcher.apply(site, descriptor)
        assert site.text() == 'fun foo(x: Int)'


class TestReturnType:
    @pytest.mark.parametrize('source,new_type,expected', [
        ('fun foo(): Int', 'Unit', 'fun foo()'),
        ('fun foo(): Int', ' Unit ', 'fun foo()'),
        ('fun foo() : Int = 1', 'Unit', 'fun foo() = 1'),
        ('fun foo(): Int { return 1 }', 'Unit', 'fun foo() { return 1 }'),
        ('fun foo(): Int', 'Long', 'fun foo(): Long'),
        ('fun foo()', 'List<String>', 'fun foo(): List<String>'),
        ('fun foo() = 1', 'Int', 'fun foo(): Int = 1'),
        ('fun foo()', 'Unit', 'fun foo()'),
    ])
    def test_return_type_change(self, patcher, parse_site, source, new_type, expected):
        site = parse_site(source)
        result = patcher.apply(site, ChangeDescriptor().set_return_type(new_type))
        assert result.succeeded
        assert site.text() == expected

    def test_custom_implicit_type(self, tree, parse_site):
        patcher = SignaturePatcher(tree, implicit_return_type='Nothing')
        site = parse_site('fun foo(): Unit')
        patcher.apply(site, ChangeDescriptor().set_return_type('Nothing'))
        assert site.text() == 'fun foo()'

    def test_constructor_ignores_return_type(self, patcher, parse_site):
        site = parse_site('class C(x: Int)')
        result = patcher.apply(site, ChangeDescriptor().set_return_type('Long'))
        assert result.succeeded
        assert 'return_type' not in result.applied_steps
        assert site.text() == 'class C(x: Int)'

    def test_nameless_function_gets_type_after_parameters(self, patcher, parse_site):
        site = parse_site('fun (x: Int)')
        result = patcher.apply(site, ChangeDescriptor().set_return_type('Int'))
        assert result.succeeded
        assert site.text() == 'fun (x: Int): Int'


class TestParameterList:
    def test_constructor_without_parameter_list_gets_one(self, patcher, parse_site, tree):
        site = parse_site('class C')
        descriptor = ChangeDescriptor().set_parameters(
            [ParameterDescriptor('x', 'Int', val_var=ValVar.VAL)],
            set_or_order_changed=True, signature='(val x: Int)')

        result = patcher.apply(site, descriptor)

        assert result.succeeded
        assert site.text() == 'class C(val x: Int)'
        assert tree.next_sibling(site.name_identifier()) == site.parameter_list()

    def test_parameter_list_goes_after_type_parameters(self, patcher, parse_site, tree):
        site = parse_site('class C<T>')
        descriptor = ChangeDescriptor().set_parameters(
            [ParameterDescriptor('x', 'T')], set_or_order_changed=True, signature='(x: T)')

        patcher.apply(site, descriptor)

        assert site.text() == 'class C<T>(x: T)'
        assert tree.prev_sibling(site.parameter_list()) == site.type_parameter_list()

    def test_existing_list_is_replaced(self, patcher, parse_site):
        site = parse_site('fun foo(a: Int, b: String): Unit')
        descriptor = ChangeDescriptor().set_parameters(
            [_same('b', 'String', 1), _same('a', 'Int', 0)], set_or_order_changed=True)

        result = patcher.apply(site, descriptor)

        assert result.applied_steps == ['parameter_list']
        assert site.text() == 'fun foo(b: String, a: Int): Unit'

    def test_reorder_on_override_keeps_its_own_names(self, patcher, parse_site):
        site = parse_site('override fun foo(first: Int, second: String)', is_inherited=True)
        descriptor = ChangeDescriptor().set_parameters([
            ParameterDescriptor('b', 'String', old_name='b', old_index=1),
            ParameterDescriptor('a', 'Int', old_name='a', old_index=0, default_value_text='0'),
        ], set_or_order_changed=True)

        patcher.apply(site, descriptor)

        assert site.text() == 'override fun foo(second: String, first: Int)'

    def test_new_parameter_with_default(self, patcher, parse_site):
        site = parse_site('fun foo(a: Int)')
        descriptor = ChangeDescriptor().set_parameters([
            _same('a', 'Int', 0),
            ParameterDescriptor('verbose', 'Boolean', default_value_text='false'),
        ], set_or_order_changed=True)

        patcher.apply(site, descriptor)

        assert site.text() == 'fun foo(a: Int, verbose: Boolean = false)'

    def test_malformed_signature_leaves_tree_untouched(self, patcher, parse_site):
        site = parse_site('fun foo(a: Int)')
        descriptor = ChangeDescriptor().rename('bar').set_parameters(
            [], set_or_order_changed=True, signature='(a: Int')
        with pytest.raises(SyntaxParseError):
            patcher.apply(site, descriptor)
        assert site.text() == 'fun foo(a: Int)'


class TestPositionalParameterEdits:
    def test_val_insertion(self, patcher, parse_site):
        site = parse_site('class C(x: Int)')
        descriptor = ChangeDescriptor().set_parameters([_same('x', 'Int', 0, val_var=ValVar.VAL)])

        result = patcher.apply(site, descriptor)

        assert result.applied_steps == ['parameters']
        assert site.text() == 'class C(val x: Int)'

    def test_type_change_keeps_default_and_annotations(self, patcher, parse_site):
        site = parse_site('fun foo(@Size(2) a: Int = 1, b: String)')
        descriptor = ChangeDescriptor().set_parameters([
            _same('a', 'Long', 0, type_changed=True),
            _same('b', 'String', 1),
        ])

        patcher.apply(site, descriptor)

        assert site.text() == 'fun foo(@Size(2) a: Long = 1, b: String)'

    def test_invalid_parameter_name_leaves_tree_untouched(self, patcher, parse_site, tree):
        site = parse_site('fun foo(a: Int, b: Int): Int')
        node_ids = [site.name_identifier()] + site.parameters()
        descriptor = ChangeDescriptor().rename('bar').set_parameters([
            _same('a', 'Int', 0, val_var=ValVar.VAL),
            ParameterDescriptor('not valid', 'Int', old_name='b', old_index=1),
        ])

        with pytest.raises(SyntaxParseError):
            patcher.apply(site, descriptor)

        assert site.text() == 'fun foo(a: Int, b: Int): Int'
        assert [site.name_identifier()] + site.parameters() == node_ids

    def test_invalid_later_type_leaves_earlier_parameters_alone(self, patcher, parse_site):
        site = parse_site('class C(a: Int, b: Int)')
        descriptor = ChangeDescriptor().set_parameters([
            _same('a', 'Long', 0, type_changed=True, val_var=ValVar.VAR),
            _same('b', 'Map<Int', 1, type_changed=True),
        ])

        with pytest.raises(SyntaxParseError):
            patcher.apply(site, descriptor)

        assert site.text() == 'class C(a: Int, b: Int)'

    def test_count_mismatch_is_a_precondition_failure(self, patcher, parse_site):
        site = parse_site('fun foo(a: Int, b: Int)')
        descriptor = ChangeDescriptor().rename('bar').set_parameters([_same('a', 'Int', 0)])
        with pytest.raises(RuntimeError) as exc_info:
            patcher.apply(site, descriptor)
        assert "declares 2 parameter(s)" in str(exc_info.value)
        assert site.text() == 'fun foo(a: Int, b: Int)'

    def test_empty_parameter_tuple_leaves_parameters_alone(self, patcher, parse_site):
        site = parse_site('fun foo(a: Int, b: Int)')
        result = patcher.apply(site, ChangeDescriptor().rename('bar'))
        assert result.applied_steps == ['name']
        assert site.text() == 'fun bar(a: Int, b: Int)'


class TestVisibility:
    def test_function_visibility(self, patcher, parse_site):
        site = parse_site('fun foo()')
        result = patcher.apply(site, ChangeDescriptor().set_visibility(Visibility.PRIVATE))
        assert result.applied_steps == ['visibility']
        assert site.text() == 'private fun foo()'

    def test_local_declaration_skips_visibility(self, patcher, parse_site):
        site = parse_site('fun helper(x: Int)', is_local=True)
        descriptor = ChangeDescriptor().rename('assist').set_visibility(Visibility.PRIVATE)

        result = patcher.apply(site, descriptor)

        assert result.succeeded
        assert result.applied_steps == ['name']
        assert site.text() == 'fun assist(x: Int)'

    def test_constructor_visibility_with_new_parameter_list(self, patcher, parse_site):
        site = parse_site('class C')
        descriptor = ChangeDescriptor().set_parameters(
            [ParameterDescriptor('x', 'Int')], set_or_order_changed=True, signature='(x: Int)'
        ).set_visibility(Visibility.PRIVATE)

        patcher.apply(site, descriptor)

        assert site.text() == 'class C private constructor(x: Int)'


class TestAnchorNotFound:
    def test_bare_class_reports_missing_anchor(self, patcher, parse_site, tree):
        site = parse_site('class')
        node_count = len(tree)
        descriptor = ChangeDescriptor().set_parameters(
            [ParameterDescriptor('x', 'Int')], set_or_order_changed=True, signature='(x: Int)')

        result = patcher.apply(site, descriptor)

        assert result.status == PatchStatus.ANCHOR_NOT_FOUND
        assert not result.succeeded
        assert site.text() == 'class'
        assert len(tree) == node_count

    def test_bare_class_visibility_reports_missing_anchor(self, patcher, parse_site):
        site = parse_site('class')
        result = patcher.apply(site, ChangeDescriptor().set_visibility(Visibility.PRIVATE))
        assert result.status == PatchStatus.ANCHOR_NOT_FOUND
        assert site.text() == 'class'

    def test_bare_class_without_anchor_needs_is_fine(self, patcher, parse_site):
        site = parse_site('class')
        result = patcher.apply(site, ChangeDescriptor().rename('C'))
        assert result.succeeded
        assert result.applied_steps == []
        assert site.text() == 'class'


class TestWholeDescriptor:
    def test_all_steps_in_order(self, patcher, parse_site):
        site = parse_site('fun foo(x: Int): Int')
        descriptor = (ChangeDescriptor()
                      .rename('bar')
                      .set_return_type('Long')
                      .set_parameters([_same('x', 'Long', 0, type_changed=True)])
                      .set_visibility(Visibility.INTERNAL))

        result = patcher.apply(site, descriptor)

        assert result.applied_steps == ['name', 'return_type', 'parameters', 'visibility']
        assert site.text() == 'internal fun bar(x: Long): Long'

    def test_reapplying_matching_descriptor_is_idempotent(self, patcher, parse_site):
        source = 'class C(x: Int, val y: String)'
        site = parse_site(source)
        descriptor = ChangeDescriptor().set_parameters([
            _same('x', 'Int', 0),
            _same('y', 'String', 1, val_var=ValVar.VAL),
        ])

        patcher.apply(site, descriptor)
        first_pass = site.text()
        patcher.apply(site, descriptor)

        assert first_pass == source
        assert site.text() == source

    def test_empty_descriptor_reports_nothing_to_change(self, patcher, parse_site):
        site = parse_site('fun foo()')
        result = patcher.apply(site, ChangeDescriptor())
        assert result.message == "Nothing to change"
        assert site.text() == 'fun foo()'

    def test_site_from_another_tree_is_rejected(self, patcher):
        from sigsync.tree import SyntaxTree, DeclarationParser
        from sigsync.refactorings.change_signature import DeclarationSite

        other = SyntaxTree()
        root = DeclarationParser(other).parse_declaration('fun foo()')
        site = DeclarationSite.for_declaration(other, root)
        with pytest.raises(RuntimeError):
            patcher.apply(site, ChangeDescriptor().rename('bar'))

    def test_parameter_nodes_survive_positional_edits(self, patcher, parse_site, tree):
        site = parse_site('fun foo(a: Int)')
        parameter = site.parameters()[0]
        patcher.apply(site, ChangeDescriptor().set_parameters([_same('a', 'Int', 0, val_var=ValVar.VAL)]))
        assert site.parameters() == [parameter]
        assert tree.kind(tree.first_child(parameter)) == NodeKind.VAL_VAR

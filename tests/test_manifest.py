"""Tests for the manifest model and ManifestService"""
import json

import pytest

from git_dep_keeper.exceptions import HostMetadataError, ManifestLoadError, PathConflictError
from git_dep_keeper.models.manifest import DependencySpec, HostMetadata, Manifest
from git_dep_keeper.services.manifest_service import ManifestService


class TestDependencySpec:
    """Test pin policy of a dependency."""

    def test_branch_defaults_to_master(self):
        dep = DependencySpec.from_dict("x", {"url": "U"})
        assert dep.pin_ref == "master"
        assert dep.is_tag_pinned is False

    def test_tag_takes_precedence_over_branch(self):
        dep = DependencySpec.from_dict("x", {"url": "U", "tag": "v1", "branch": "dev"})
        assert dep.is_tag_pinned is True
        assert dep.pin_ref == "v1"
        assert dep.branch is None
        assert dep.to_dict() == {"url": "U", "tag": "v1"}

    def test_null_tag_falls_back_to_branch(self):
        dep = DependencySpec.from_dict("x", {"url": "U", "tag": None, "branch": "dev"})
        assert dep.is_tag_pinned is False
        assert dep.pin_ref == "dev"

    def test_null_branch_means_master(self):
        dep = DependencySpec.from_dict("x", {"url": "U", "branch": None})
        assert dep.pin_ref == "master"
        assert dep.to_dict() == {"url": "U"}

    def test_missing_url_is_rejected(self):
        with pytest.raises(ManifestLoadError, match="no url"):
            DependencySpec.from_dict("x", {"branch": "main"})

    def test_non_string_tag_is_rejected(self):
        with pytest.raises(ManifestLoadError, match="non-string tag"):
            DependencySpec.from_dict("x", {"url": "U", "tag": 12})


class TestManifestPaths:
    """Test path formatting and filesystem probes."""

    def test_repo_path_posix(self):
        manifest = Manifest(root="./deps")
        assert manifest.repo_path("lib") == "./deps/lib"

    def test_repo_path_win32(self):
        manifest = Manifest(root="deps", path_convention="win32")
        assert manifest.repo_path("lib") == "deps\\lib"

    def test_unknown_path_convention(self):
        with pytest.raises(ValueError):
            Manifest(path_convention="vms")

    def test_dependency_names_keep_declaration_order(self):
        manifest = Manifest.from_dict({"deps": {
            "zeta": {"url": "z"}, "alpha": {"url": "a"}, "Mid": {"url": "m"},
        }})
        assert manifest.dependency_names() == ["zeta", "alpha", "Mid"]

    def test_repo_exists_relative_to_base_dir(self, project_dir):
        (project_dir / "deps" / "a").mkdir(parents=True)
        manifest = Manifest(base_dir=str(project_dir))
        assert manifest.repo_exists("a") is True
        assert manifest.repo_exists("b") is False

    def test_root_entries_ignore_files(self, project_dir):
        root = project_dir / "deps"
        for name in ("a", "b", "c"):
            (root / name).mkdir(parents=True)
        (root / "README.txt").write_text("not a repo")
        manifest = Manifest(base_dir=str(project_dir))
        assert manifest.root_entries() == ["a", "b", "c"]

    def test_root_entries_without_root(self, project_dir):
        assert Manifest(base_dir=str(project_dir)).root_entries() == []


class TestHostMetadata:
    """Test the collective tag built from the host descriptor."""

    def test_collective_tag(self):
        host = HostMetadata.from_dict({"name": "app", "version": "1.2.3"})
        assert host.collective_tag() == "app-1.2.3"

    def test_collective_tag_needs_version(self):
        with pytest.raises(HostMetadataError, match="version"):
            HostMetadata(name="app").collective_tag()


class TestManifestService:
    """Test loading, saving and creating manifests."""

    def test_load_missing_files_gives_defaults(self, project_dir):
        manifest, host = ManifestService().load(str(project_dir))
        assert manifest.dependencies == {}
        assert manifest.root == "./deps"
        assert manifest.path_convention == "posix"
        assert host.name is None
        assert host.dependencies == {}

    def test_load_manifest_and_host(self, project_dir, write_json):
        write_json(project_dir / "git-dep-keeper.json", {
            "root": "./vendor",
            "deps": {
                "a": {"url": "https://example.com/a.git", "tag": "v1"},
                "b": {"url": "https://example.com/b.git", "branch": "main"},
            },
        })
        write_json(project_dir / "package.json", {"name": "app", "version": "2.0.0", "dependencies": {}})

        manifest, host = ManifestService().load(str(project_dir))

        assert manifest.root == "./vendor"
        assert manifest.base_dir == str(project_dir)
        assert manifest.dependencies["a"].tag == "v1"
        assert manifest.dependencies["b"].pin_ref == "main"
        assert host.collective_tag() == "app-2.0.0"

    def test_custom_file_names(self, project_dir, write_json):
        write_json(project_dir / "deps.json", {"deps": {"a": {"url": "U"}}})
        manifest = ManifestService(manifest_file="deps.json").load_manifest(str(project_dir))
        assert manifest.dependency_names() == ["a"]

    def test_malformed_json_fails(self, project_dir):
        (project_dir / "git-dep-keeper.json").write_text("{not json")
        with pytest.raises(ManifestLoadError, match="invalid JSON"):
            ManifestService().load(str(project_dir))

    def test_malformed_host_descriptor_fails(self, project_dir):
        (project_dir / "package.json").write_text("[1, 2")
        with pytest.raises(ManifestLoadError):
            ManifestService().load(str(project_dir))

    @pytest.mark.parametrize("document, message", [
        ([], "top level"),
        ({"deps": []}, "deps must be an object"),
        ({"deps": {"a": "https://example.com/a.git"}}, "must be an object"),
        ({"pathConvention": "amiga"}, "pathConvention"),
    ])
    def test_invalid_structure_fails(self, project_dir, write_json, document, message):
        write_json(project_dir / "git-dep-keeper.json", document)
        with pytest.raises(ManifestLoadError, match=message):
            ManifestService().load_manifest(str(project_dir))

    def test_save_overwrites(self, project_dir):
        path = project_dir / "git-dep-keeper.json"
        path.write_text("old content")
        manifest = Manifest(dependencies={"a": DependencySpec("U", branch="dev")})

        ManifestService().save(manifest, str(path))

        assert json.loads(path.read_text()) == {
            "root": "./deps",
            "pathConvention": "posix",
            "deps": {"a": {"url": "U", "branch": "dev"}},
        }

    def test_init_creates_empty_manifest(self, project_dir):
        path = ManifestService().init(str(project_dir))
        assert json.loads((project_dir / "git-dep-keeper.json").read_text())["deps"] == {}
        assert path.endswith("git-dep-keeper.json")

    def test_init_never_overwrites(self, project_dir, write_json):
        service = ManifestService()
        service.init(str(project_dir))
        path = project_dir / "git-dep-keeper.json"
        write_json(path, {"deps": {"a": {"url": "U"}}})

        with pytest.raises(PathConflictError):
            service.init(str(project_dir))

        assert json.loads(path.read_text()) == {"deps": {"a": {"url": "U"}}}

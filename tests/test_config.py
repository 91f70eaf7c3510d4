from session import Config, load_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config == Config()
    assert config.camera.mirror is True
    assert config.gestures.mode == "signs"
    assert config.particles.particle_count == 1400
    assert config.particles.repel_radius == 130.0
    assert config.text.grid_step == 6


def test_partial_file_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "gestures:\n"
        "  mode: letters\n"
        "  hold_frames: 4\n"
        "particles:\n"
        "  particle_count: 300\n"
        "  not_a_setting: 1\n"
        "ui:\n"
        "  corner_label: NADIM\n"
    )
    config = load_config(path)
    assert config.gestures.mode == "letters"
    assert config.gestures.hold_frames == 4
    assert config.particles.particle_count == 300
    assert config.particles.star_count == 200
    assert config.ui.corner_label == "NADIM"
    assert config.camera == Config().camera


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


def test_repo_config_loads():
    config = load_config()
    assert config.ui.window_title == "Galaxy Hands"

from tracker.run.heart_rate import heart_rate_zones, max_heart_rate, summarize_bpm, zone_for_bpm


def test_summary_of_samples():
    assert summarize_bpm([]) == (0, 0, 0)
    assert summarize_bpm([120, 150, 141]) == (137, 120, 150)


def test_max_heart_rate():
    assert max_heart_rate(age=40) == 180
    assert max_heart_rate(hr_max=195) == 195


def test_zones_cover_range_without_gaps():
    zones = heart_rate_zones(190)
    assert [z.zone for z in zones] == [1, 2, 3, 4, 5]
    assert zones[0].min_bpm == 0
    assert zones[-1].max_bpm == 190
    for low, high in zip(zones, zones[1:]):
        assert high.min_bpm == low.max_bpm + 1


def test_zone_for_bpm():
    assert zone_for_bpm(90, hr_max=190) == 1
    assert zone_for_bpm(100, hr_max=190) == 2
    assert zone_for_bpm(160, hr_max=190) == 5
    assert zone_for_bpm(0, hr_max=190) is None
    assert zone_for_bpm(200, hr_max=190) is None

from encoder.params import MotionVector


def parse_mv(mv_str: str):
    mv_field = {}
    mv_blocks = mv_str.strip().split('|')
    for b in mv_blocks[:-1]:  # ignore last element which will be empty
        kv_pairs = b.strip().split(':')
        cords_txt = kv_pairs[0].split(',')
        mv_txt = kv_pairs[1].split(',')
        cords = (int(cords_txt[0]), int(cords_txt[1]))
        mv_field[cords] = MotionVector(int(mv_txt[0]), int(mv_txt[1]))
    return mv_field


def get_mv_extremes(mv_field):
    """Per-component [min, max] of a {(col, row): MotionVector} field."""
    dxs = [mv.dx for mv in mv_field.values()]
    dys = [mv.dy for mv in mv_field.values()]
    return [min(dxs), min(dys)], [max(dxs), max(dys)]

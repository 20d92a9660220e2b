"""
どこで: `engine.render` サブパッケージ。
何を: ワールド座標の図形（背景・軸・ベクトル）を Pillow 画像へラスタライズする入口。
なぜ: 計算（core）と描画の責務を分離し、フレームごとに独立した画像生成を可能にするため。
"""

from datetime import datetime

BLOG_ARTICLES = [
    {
        "title": "Akdeniz Diyeti: Kalp Sağlığı İçin Bilimsel Temeller",
        "summary": "Zeytinyağı, baklagiller ve balık ağırlıklı beslenmenin kardiyovasküler riski nasıl azalttığını inceliyoruz.",
        "content": "Akdeniz tipi beslenme; sebze, meyve, tam tahıl, baklagil ve zeytinyağını temel alır. Kırmızı et tüketimi sınırlıdır, balık haftada en az iki kez tüketilir.",
        "author": "Dyt. Elif Arslan",
        "category": "beslenme",
        "published_at": datetime(2024, 1, 8, 9, 0),
        "read_time": 6,
        "image_url": "https://images.unsplash.com/photo-1498837167922-ddd27525d352",
    },
    {
        "title": "Protein İhtiyacınızı Doğru Hesaplamak",
        "summary": "Kilogram başına protein hedefi, yaş ve aktivite düzeyine göre nasıl belirlenir?",
        "content": "Sedanter yetişkinler için günlük 0,8 g/kg yeterli kabul edilirken düzenli egzersiz yapanlarda bu değer 1,2-2,0 g/kg aralığına çıkar.",
        "author": "Dyt. Mert Kaya",
        "category": "makro",
        "published_at": datetime(2024, 2, 14, 10, 30),
        "read_time": 5,
        "image_url": "https://images.unsplash.com/photo-1532550907401-a500c9a57435",
    },
    {
        "title": "Aralıklı Oruç Herkes İçin Uygun mu?",
        "summary": "16:8 ve 5:2 yöntemlerinin avantajları, riskleri ve kimlerin kaçınması gerektiği.",
        "content": "Aralıklı oruç kalori kısıtlamasını kolaylaştırabilir; ancak diyabet, gebelik ve yeme bozukluğu öyküsü olan kişilerde uzman kontrolü şarttır.",
        "author": "Dyt. Elif Arslan",
        "category": "diyet",
        "published_at": datetime(2024, 3, 2, 8, 15),
        "read_time": 7,
        "image_url": "https://images.unsplash.com/photo-1490645935967-10de6ba17061",
    },
    {
        "title": "Su Tüketimi ve Metabolizma",
        "summary": "Günlük sıvı ihtiyacı, hidrasyonun performansa etkisi ve pratik takip önerileri.",
        "content": "Yetişkinler için genel öneri günde 30-35 ml/kg sıvıdır. Sıcak havada ve egzersiz sırasında kayıplar artar.",
        "author": "Dyt. Selin Demir",
        "category": "yaşam",
        "published_at": datetime(2024, 4, 19, 14, 0),
        "read_time": 4,
        "image_url": "https://images.unsplash.com/photo-1548839140-29a749e1cf4d",
    },
    {
        "title": "Vücut Kitle İndeksi Neyi Söyler, Neyi Söylemez?",
        "summary": "BKİ'nin sınıflandırma gücü ve kas kütlesi yüksek bireylerde yanıltıcı olabileceği durumlar.",
        "content": "BKİ kilonun boyun karesine oranıdır. Toplum taramasında kullanışlıdır fakat yağ dağılımını ve kas kütlesini ayırt etmez; bel çevresi ile birlikte değerlendirilmelidir.",
        "author": "Dyt. Mert Kaya",
        "category": "ölçüm",
        "published_at": datetime(2024, 5, 27, 11, 45),
        "read_time": 5,
        "image_url": "https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b",
    },
]
